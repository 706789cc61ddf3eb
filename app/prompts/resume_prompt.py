from __future__ import annotations

from dataclasses import dataclass

from app.schemas.resume import Education, Experience, Profile


@dataclass(frozen=True)
class PromptLimits:
    total_skills: str
    skills_per_category: str
    bullets_per_job: str
    recent_job_bullets: str
    older_job_bullets: str


DEFAULT_LIMITS = PromptLimits(
    total_skills="60-80",
    skills_per_category="8-12",
    bullets_per_job="6-8",
    recent_job_bullets="8",
    older_job_bullets="5-6",
)

# Used for the single re-prompt after a length-truncated response.
CONCISE_LIMITS = PromptLimits(
    total_skills="50-60",
    skills_per_category="6-10",
    bullets_per_job="4-5",
    recent_job_bullets="5",
    older_job_bullets="4",
)

_JSON_SHAPE = (
    '{"title":"...","summary":"...","skills":{"Category":["Skill1","Skill2"]},'
    '"experience":[{"title":"...","details":["bullet1","bullet2"]}]}'
)


def adjusted_experience_years(calculated_years: int) -> int:
    """Years quoted to the model: one below the calculated figure, never negative."""
    return max(0, calculated_years - 1)


def _work_history_line(index: int, job: Experience) -> str:
    parts = [f"{index}. {job.company or ''}"]
    if job.title:
        parts.append(job.title)
    if job.location:
        parts.append(job.location)
    parts.append(f"{job.start_date or ''} - {job.end_date or ''}")
    return " | ".join(parts)


def _education_line(edu: Education) -> str:
    return f"- {edu.degree or ''}, {edu.school or ''} ({edu.start_year or ''}-{edu.end_year or ''})"


def _profile_block(profile: Profile, years: int) -> str:
    most_recent_title = profile.experience[0].title if profile.experience and profile.experience[0].title else "N/A"
    contact = " | ".join(str(value or "") for value in (profile.email, profile.phone, profile.location))
    history = "\n".join(_work_history_line(idx, job) for idx, job in enumerate(profile.experience, start=1))
    education = "\n".join(_education_line(edu) for edu in profile.education)
    return (
        "## PROFILE DATA:\n"
        f"**Candidate:** {profile.name}\n"
        f"**Contact:** {contact}\n"
        f"**Experience:** {years} years\n"
        f"**Most Recent Title:** {most_recent_title} (USE THIS AS BASE TITLE)\n\n"
        f"**WORK HISTORY:**\n{history}\n\n"
        f"**EDUCATION:**\n{education}\n"
    )


def _instructions(years: int, job_count: int, limits: PromptLimits) -> str:
    return f"""## INSTRUCTIONS:

### 1. EXTRACT DOMAIN KEYWORDS
Analyze the company and product description in the job posting for 10-15 domain or compliance keywords
specific to the company's industry (for example PCI-DSS and KYC/AML for payments, HIPAA and FHIR for
healthcare, OAuth2, SAML and SOC 2 for identity and security, data governance and lineage for data platforms).
Use 3-5 of them in the summary, a dedicated skills category with 10-15 of them when relevant, and 2-3
experience bullets.

### 2. TITLE
- Base title: the candidate's MOST RECENT job title (first entry of the work history).
- If the base title matches or is very similar to the posting's title, use:
  [Base Title] | [Key Tech 1] | [Key Tech 2] | [Key Tech 3] | [Key Tech 4]
- Otherwise add one specialization aligned with the posting's focus (e.g. "Frontend Specialist",
  "Backend Architect", "Infrastructure Lead"):
  [Base Title] | [Specialization] | [Key Tech 1] | [Key Tech 2] | [Key Tech 3] | [Key Tech 4]
- Take 4-6 of the most important technologies from the posting. Separate items with " | ".

### 3. SUMMARY (5-6 lines, 8-12 posting keywords plus 3-5 domain keywords)
- Line 1: [Base Title] with {years}+ years in [domain from posting] across startup and enterprise environments
- Line 2: Expertise in [domain keyword] plus 3-4 EXACT posting technologies, with versions if specified
- Line 3: Proven track record in [domain keyword] plus a key achievement with a metric
- Line 4: Proficient in 3-4 more posting technologies or methodologies
- Line 5: [Soft skill from posting] professional with Agile, leadership or collaboration experience
- Line 6: Strong focus on 2-3 key posting skill areas and delivering scalable, production-ready solutions

### 4. SKILLS ({limits.total_skills} total, 5-8 categories)
- Categories follow the posting's focus (Frontend, Backend, Cloud, DevOps, Security, ...)
- {limits.skills_per_category} skills per category
- Capitalize the first letter of each skill
- No version or database spam ("PostgreSQL", not "PostgreSQL 15, 14, 13")
- Group cloud services: "AWS (Lambda, S3, EC2, RDS)"
- 70% posting keywords, 30% complementary skills

### 5. EXPERIENCE ({job_count} entries, {limits.bullets_per_job} bullets each)
- Generate {job_count} job entries matching the work history, in the same order
- {limits.bullets_per_job} bullets per job (most recent jobs get {limits.recent_job_bullets}, older jobs {limits.older_job_bullets})
- 25-35 words per bullet, 2-4 posting keywords per bullet, a metric in every bullet (%, $, time, scale, users)
- Structure: [Action Verb] + [Posting Technology] + [what was built] + [business impact] + [metric]
- Use verbs such as Architected, Engineered, Designed, Built, Implemented, Optimized, Led, Automated
- Avoid "Responsible for", "Duties included", "Tasked with", "Worked on"
- Add industry context to 2-3 bullets per job

## ATS OPTIMIZATION CHECKLIST
- Use EXACT phrases from the posting, not synonyms
- High-priority keywords appear 3-4 times (skills, summary, 2-3 bullets)
- All required and preferred posting skills appear in the skills section
- Natural, professional tone with varied action verbs
"""


def build_resume_prompt(profile: Profile, jd: str, years: int, *, concise: bool = False) -> str:
    """Instruction text asking the model for tailored resume copy as a single JSON object."""
    limits = CONCISE_LIMITS if concise else DEFAULT_LIMITS
    return (
        "You are a world-class ATS optimization expert. Create a resume that scores 95-100% on ATS.\n\n"
        "**CRITICAL OUTPUT: Return ONLY valid JSON. No markdown, explanations, or extra text.**\n"
        'Format: {"title":"...","summary":"...","skills":{...},"experience":[...]}\n\n'
        f"{_profile_block(profile, years)}\n"
        "---\n\n"
        f"## JOB DESCRIPTION:\n{jd}\n\n"
        "---\n\n"
        f"{_instructions(years, len(profile.experience), limits)}\n"
        "---\n\n"
        f"Return ONLY valid JSON: {_JSON_SHAPE}\n"
    )

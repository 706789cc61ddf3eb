from __future__ import annotations

from app.core.errors import MissingFieldsError
from app.schemas.resume import ModelContent, Profile, RenderData, RenderExperience

FALLBACK_TITLE = "Engineer"


def assemble_render_data(profile: Profile, content: ModelContent) -> RenderData:
    """Merge model copy into the profile; profile facts always win."""
    experience: list[RenderExperience] = []
    for index, job in enumerate(profile.experience):
        generated = content.experience[index] if index < len(content.experience) else None
        experience.append(
            RenderExperience(
                title=job.title or (generated.title if generated else "") or FALLBACK_TITLE,
                company=job.company,
                location=job.location,
                start_date=job.start_date,
                end_date=job.end_date,
                details=list(generated.details) if generated else [],
            )
        )

    data = RenderData(
        name=profile.name,
        title=content.title,
        email=profile.email,
        phone=profile.phone,
        location=profile.location,
        linkedin=profile.linkedin,
        website=profile.website,
        summary=content.summary,
        skills=content.skills,
        experience=experience,
        education=list(profile.education),
    )

    empty = [key for key in ("title", "summary", "skills", "experience") if not getattr(data, key)]
    if empty:
        raise MissingFieldsError(f"Resume data is missing required sections: {', '.join(empty)}")
    return data

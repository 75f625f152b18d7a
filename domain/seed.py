"""Demo records shown on first start when no data exists anywhere."""

from __future__ import annotations

from domain.models import JobApplication, JobStatus

DEFAULT_SEED: tuple[JobApplication, ...] = (
    JobApplication(
        id="demo-1",
        company="Stripe",
        role="Backend Engineer",
        status=JobStatus.INTERVIEW,
        date_applied="2024-05-02",
        last_updated="2024-05-10",
        link="https://stripe.com/jobs",
        notes="Recruiter screen went well.\n\n**Next:** system design round.",
        next_action="Prepare system design",
        next_action_date="2024-05-15",
        location="Remote",
    ),
    JobApplication(
        id="demo-2",
        company="Netflix",
        role="Senior Software Engineer",
        status=JobStatus.APPLIED,
        date_applied="2024-05-06",
        last_updated="2024-05-06",
        location="Los Gatos, CA",
    ),
    JobApplication(
        id="demo-3",
        company="Shopify",
        role="Platform Engineer",
        status=JobStatus.REJECTED,
        date_applied="2024-04-18",
        last_updated="2024-05-01",
        notes="Position filled internally.",
    ),
)

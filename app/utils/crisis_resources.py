# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the Neura - Your Smart Assistant project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import List, Optional

from app.schemas.crisis_schemas import CrisisResource, CrisisResponse, CrisisSeverity


# 📞 Static hotline catalogue, US numbers
CRISIS_RESOURCES: List[CrisisResource] = [
    CrisisResource(
        id="988",
        name="988 Suicide & Crisis Lifeline",
        description="Free, confidential support 24/7",
        phone="988",
        text_line="988",
        website="https://988lifeline.org",
    ),
    CrisisResource(
        id="crisis-text",
        name="Crisis Text Line",
        description="Text HOME to 741741",
        text_line="741741",
        website="https://www.crisistextline.org",
    ),
    CrisisResource(
        id="samhsa",
        name="SAMHSA National Helpline",
        description="Treatment referral service",
        phone="1-800-662-4357",
        website="https://www.samhsa.gov/find-help/national-helpline",
    ),
    CrisisResource(
        id="trevor",
        name="The Trevor Project",
        description="LGBTQ+ youth crisis support",
        phone="1-866-488-7386",
        text_line="678-678",
        website="https://www.thetrevorproject.org",
    ),
    CrisisResource(
        id="veterans",
        name="Veterans Crisis Line",
        description="Support for veterans",
        phone="1-800-273-8255",
        text_line="838255",
        website="https://www.veteranscrisisline.net",
    ),
]

# Resources recorded on an explicit support request
EXPLICIT_REQUEST_RESOURCE_IDS = ["988", "crisis-text", "samhsa"]


def get_resource(resource_id: str) -> Optional[CrisisResource]:
    return next((r for r in CRISIS_RESOURCES if r.id == resource_id), None)


def resource_ids_for(severity: CrisisSeverity) -> List[str]:
    """
    High severity shows every line. Lower severities show the
    general-purpose lines only.
    """
    if severity == CrisisSeverity.high:
        return [r.id for r in CRISIS_RESOURCES]
    return list(EXPLICIT_REQUEST_RESOURCE_IDS)


def get_crisis_response(severity: CrisisSeverity) -> CrisisResponse:
    resources = [get_resource(rid) for rid in resource_ids_for(severity)]

    if severity == CrisisSeverity.high:
        return CrisisResponse(
            title="We're Here for You",
            message=(
                "It sounds like you're going through a really difficult time. "
                "You don't have to face this alone. Please consider reaching out "
                "to someone who can help."
            ),
            show_resources=True,
            show_emergency=True,
            resources=resources,
        )

    if severity == CrisisSeverity.medium:
        return CrisisResponse(
            title="We Notice You're Struggling",
            message=(
                "It looks like things are tough right now. Remember, it's okay to "
                "ask for help. Here are some resources that might help."
            ),
            show_resources=True,
            show_emergency=False,
            resources=resources,
        )

    return CrisisResponse(
        title="Checking In",
        message=(
            "We noticed some signs that you might be having a hard time. "
            "Would you like to explore some support resources?"
        ),
        show_resources=True,
        show_emergency=False,
        resources=resources,
    )

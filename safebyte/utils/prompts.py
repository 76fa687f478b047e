"""
Prompt template builders for the chat assistant.
All prompt strings live here — no hardcoded prompts elsewhere in the codebase.
"""

from __future__ import annotations

from safebyte.schemas.profile import UserProfile
from safebyte.utils.allergy_data import DEFAULT_SEVERITY

NO_ALLERGIES_MARKER = "No allergies listed"

_ASSISTANT_INTRO = (
    "You are SafeByte, an AI food safety assistant specializing in helping people "
    "with food allergies and dietary restrictions find safe dining options."
)

_ASSISTANT_DIRECTIVES = """Your responsibilities:
1. Help users find safe dining options based on their allergies and dietary restrictions
2. Analyze menus when provided
3. Suggest safe dishes and cuisines
4. Be cautious about cross-contamination
5. Always remind users to inform servers about their allergies
6. Provide practical advice for dining out safely
7. Be empathetic and understanding about food allergies

Important: You are an assistant, not a medical professional. Always encourage users to verify ingredients with restaurants and consult medical professionals if needed."""


def build_allergy_line(profile: UserProfile) -> str:
    """'Allergies: Peanuts (severe), Soy (moderate)' or the no-allergies marker."""
    if not profile.allergies:
        return NO_ALLERGIES_MARKER
    entries = [
        f"{allergy} ({profile.severity_levels.get(allergy, DEFAULT_SEVERITY)})"
        for allergy in profile.allergies
    ]
    return "Allergies: " + ", ".join(entries)


def build_profile_summary(profile: UserProfile) -> str:
    """Render the dietary profile section of the system prompt."""
    lines = [build_allergy_line(profile)]
    if profile.diet_tags:
        lines.append("Dietary Preferences: " + ", ".join(profile.diet_tags))
    if profile.notes:
        lines.append(f"Additional Notes: {profile.notes}")
    return "\n".join(lines)


def build_system_prompt(profile: UserProfile) -> str:
    """
    Build the system prompt for every chat call.

    The profile summary always precedes the fixed directives so the model sees
    the user's allergies before any behavioural instruction.
    """
    return f"""{_ASSISTANT_INTRO}

User's Dietary Profile:
{build_profile_summary(profile)}

{_ASSISTANT_DIRECTIVES}"""

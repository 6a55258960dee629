# app/core/departments.py

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional


@dataclass(frozen=True)
class DepartmentRequirements:
    min_age: int = 13
    discord_required: bool = True
    mic_required: bool = False
    background_check: bool = False
    training_required: bool = False
    experience_preferred: bool = False


@dataclass(frozen=True)
class Department:
    id: str
    name: str
    full_name: str
    description: str
    motto: str
    is_open: bool = True
    color: int = 0x3B82F6
    requirements: DepartmentRequirements = field(default_factory=DepartmentRequirements)

    def to_dict(self) -> dict:
        return asdict(self)


# ==========================================================
# QUESTION SETS
# ==========================================================
STAFF_QUESTIONS = [
    "Why do you want to be staff?",
    "What are the key responsibilities within staff?",
    "What is RDM?",
    "What is FRP?",
    "What is Meta Gaming?",
    "Why should we choose you over others?",
    "What will you bring to the team?",
    "Will you meet the quota of 2 hours per week and 200 messages in main chat?",
    "Do you agree these are your own answers?",
    "Any questions for us?",
]

DEPARTMENT_QUESTIONS = [
    "Why do you want to join this department?",
    "Describe any previous roleplay experience relevant to this department.",
    "What is RDM?",
    "What is VDM?",
    "What is FRP?",
    "How would you handle a scene that is getting out of control?",
    "How many hours per week can you be active?",
    "What will you bring to the department?",
    "Do you agree these are your own answers?",
    "Any questions for us?",
]


# ==========================================================
# CATALOG (immutable reference data)
# ==========================================================
DEPARTMENTS: List[Department] = [
    Department(
        id="staff",
        name="Staff",
        full_name="Orlando City Roleplay Staff",
        description=(
            "Join our dedicated staff team and help shape the Orlando City Roleplay experience. "
            "Staff members maintain server quality, assist players, and make sure everyone has "
            "an enjoyable roleplay experience."
        ),
        motto="Dedication, Integrity, Community",
        color=0x3B82F6,
        requirements=DepartmentRequirements(),
    ),
    Department(
        id="ocso",
        name="OCSO",
        full_name="Orange County Sheriff's Office",
        description=(
            "A law enforcement agency serving Orange County, providing patrol, criminal "
            "investigations, emergency response, and crime prevention."
        ),
        motto="Trust, Transparency, Dignity & Respect",
        color=0x15803D,
        requirements=DepartmentRequirements(mic_required=True, background_check=True),
    ),
    Department(
        id="ocpd",
        name="OCPD",
        full_name="Orlando City Police Department",
        description=(
            "A professional law enforcement agency focused on protecting the community and "
            "upholding the law with integrity, respect, and realism."
        ),
        motto="Courage, Pride, Commitment",
        color=0x1D4ED8,
        requirements=DepartmentRequirements(mic_required=True, training_required=True),
    ),
    Department(
        id="ocfrd",
        name="OCFRD",
        full_name="Orlando City Fire & Rescue Department",
        description=(
            "Emergency services team handling fire suppression, medical emergencies, and "
            "rescue operations."
        ),
        motto="We Rise to Save",
        color=0xDC2626,
        requirements=DepartmentRequirements(mic_required=True, experience_preferred=True),
    ),
    Department(
        id="fhp",
        name="FHP",
        full_name="Florida Highway Patrol",
        description=(
            "State law enforcement focused on highway safety: pursuits, traffic enforcement, "
            "accident response, and DUI patrols."
        ),
        motto="Courtesy, Service, and Protection",
        color=0xA16207,
        requirements=DepartmentRequirements(mic_required=True, background_check=True),
    ),
    Department(
        id="fwc",
        name="FWC",
        full_name="Florida Fish and Wildlife Conservation Commission",
        description=(
            "Protects natural resources and wildlife, patrolling rural areas, waterways, and "
            "parks."
        ),
        motto="Patrol, Protect, Preserve",
        color=0x047857,
        requirements=DepartmentRequirements(experience_preferred=True),
    ),
    Department(
        id="civilian",
        name="Civilian Ops",
        full_name="Orlando City Civilian Operations",
        description=(
            "Realistic civilian roleplay, from business owners to everyday citizens, that makes "
            "the city feel alive."
        ),
        motto="Building Community, Creating Stories",
        color=0x7C3AED,
        requirements=DepartmentRequirements(),
    ),
    Department(
        id="fdot",
        name="FDOT",
        full_name="Florida Department of Transportation",
        description=(
            "Road construction, maintenance, traffic management, and emergency road repairs."
        ),
        motto="Moving Florida Forward",
        color=0xEA580C,
        requirements=DepartmentRequirements(experience_preferred=True),
    ),
]

DEPARTMENTS_BY_ID: Dict[str, Department] = {d.id: d for d in DEPARTMENTS}

DEFAULT_QUESTIONS: Dict[str, List[str]] = {
    d.id: (STAFF_QUESTIONS if d.id == "staff" else DEPARTMENT_QUESTIONS)
    for d in DEPARTMENTS
}


def get_department(department_id: str) -> Optional[Department]:
    return DEPARTMENTS_BY_ID.get((department_id or "").strip().lower())


def get_open_department(department_id: str) -> Optional[Department]:
    dept = get_department(department_id)
    if dept is None or not dept.is_open:
        return None
    return dept

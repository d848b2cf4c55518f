"""
Practice-area taxonomy.

Each area carries case-insensitive substring keywords matched against
business names and type labels. The table is immutable; classifiers
receive it as a constructor argument.
"""
from dataclasses import dataclass
from typing import Tuple


GENERAL_PRACTICE = "general"


@dataclass(frozen=True)
class PracticeArea:
    slug: str
    display_name: str
    keywords: Tuple[str, ...]
    urgency: str  # "high", "medium" or "low"


PRACTICE_AREAS: Tuple[PracticeArea, ...] = (
    PracticeArea(
        "personal-injury",
        "Personal Injury",
        ("personal injury", "injury", "accident", "negligence", "liability", "slip and fall", "premises liability"),
        "high",
    ),
    PracticeArea(
        "car-accident",
        "Car Accident",
        ("car accident", "auto accident", "vehicle accident", "car crash", "auto crash", "car wreck", "traffic accident", "auto injury"),
        "high",
    ),
    PracticeArea(
        "divorce",
        "Divorce",
        ("divorce", "dissolution", "marital", "separation"),
        "medium",
    ),
    PracticeArea(
        "family-law",
        "Family Law",
        ("family law", "family", "custody", "child custody", "child support", "adoption", "paternity", "guardianship", "domestic"),
        "medium",
    ),
    PracticeArea(
        "criminal-defense",
        "Criminal Defense",
        ("criminal defense", "criminal", "defense", "felony", "misdemeanor", "assault", "theft", "drug"),
        "high",
    ),
    PracticeArea(
        "dui",
        "DUI / DWI",
        ("dui", "dwi", "drunk driving", "driving under influence", "impaired driving", "intoxicated"),
        "high",
    ),
    PracticeArea(
        "estate-planning",
        "Estate Planning",
        ("estate planning", "estate", "will", "trust", "probate", "inheritance", "power of attorney", "living will", "elder law", "elder"),
        "low",
    ),
    PracticeArea(
        "immigration",
        "Immigration",
        ("immigration", "visa", "green card", "citizenship", "deportation", "asylum", "naturalization", "USCIS"),
        "high",
    ),
    PracticeArea(
        "bankruptcy",
        "Bankruptcy",
        ("bankruptcy", "chapter 7", "chapter 13", "debt relief", "insolvency", "creditor"),
        "medium",
    ),
    PracticeArea(
        "real-estate",
        "Real Estate",
        ("real estate", "property", "closing", "title", "deed", "landlord", "tenant", "lease", "eviction", "housing"),
        "medium",
    ),
    PracticeArea(
        "employment",
        "Employment Law",
        ("employment", "employment law", "labor", "wrongful termination", "discrimination", "harassment", "workplace", "workers compensation", "workers comp", "wage"),
        "medium",
    ),
    PracticeArea(
        "workers-compensation",
        "Workers Compensation",
        ("workers compensation", "workers comp", "work injury", "workplace injury", "on the job injury", "occupational"),
        "high",
    ),
    PracticeArea(
        "medical-malpractice",
        "Medical Malpractice",
        ("medical malpractice", "malpractice", "medical negligence", "surgical error", "misdiagnosis", "hospital negligence"),
        "medium",
    ),
    PracticeArea(
        "tax",
        "Tax Law",
        ("tax", "tax law", "IRS", "tax debt", "tax resolution", "audit", "tax lien", "tax levy"),
        "medium",
    ),
    PracticeArea(
        "traffic-ticket",
        "Traffic Ticket",
        ("traffic ticket", "traffic", "speeding ticket", "speeding", "traffic violation", "moving violation", "ticket"),
        "low",
    ),
)

# Areas that get dedicated emergency (late-night) listing pages
EMERGENCY_PRACTICE_AREAS: Tuple[str, ...] = (
    "criminal-defense",
    "dui",
    "personal-injury",
    "family-law",
    "immigration",
)

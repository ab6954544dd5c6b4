"""Core business logic for the tutoring marketplace.

Modules:
- errors: typed error kinds and context wrapping
- ordering: listing order options and comparators
- directory: keyed registry shared by students and tutors
- students: Student records and the student directory
- tutors: TutorProfile and the tutor directory
- reputation: rating update rule and tier derivation
- matching: best-match tutor selection for help requests
- donations: donation splitting and platform revenue
- marketplace: facade used by the CLI
- state: JSON snapshot of the marketplace
"""

__all__ = [
    "errors",
    "ordering",
    "directory",
    "students",
    "tutors",
    "reputation",
    "matching",
    "donations",
    "marketplace",
    "state",
]

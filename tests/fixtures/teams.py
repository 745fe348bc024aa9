"""Two navigations to the same type, one collection pointing back."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Team:
    TeamID: int
    Members: List["Person"] = field(default_factory=list)


@dataclass
class Person:
    PersonID: int
    TeamID: Optional[int] = None
    Team: Optional["Team"] = None
    MentorTeamID: Optional[int] = None
    MentorTeam: Optional["Team"] = None

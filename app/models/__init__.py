"""
Database models package.
"""

from app.models.user import User, UserType, AdminRole
from app.models.department import Department
from app.models.position import Position
from app.models.stack import Stack
from app.models.problem import Problem, ProblemStack, ProblemDifficulty
from app.models.candidate import Candidate, CandidateState
from app.models.submission import Submission

__all__ = [
    "User", "UserType", "AdminRole",
    "Department", "Position", "Stack",
    "Problem", "ProblemStack", "ProblemDifficulty",
    "Candidate", "CandidateState", "Submission",
]

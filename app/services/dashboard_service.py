"""
Admin dashboard statistics.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core.clock import as_aware_utc, utcnow
from app.models.candidate import Candidate
from app.models.department import Department
from app.models.position import Position
from app.models.problem import Problem
from app.models.stack import Stack
from app.models.submission import Submission

TREND_DAYS = 7
RECENT_COUNT = 3


def _daily_counts(timestamps: List[datetime], today: datetime) -> List[Dict[str, Any]]:
    """Bucket timestamps into the last TREND_DAYS calendar days (UTC), oldest first."""
    per_day: Dict[str, int] = {}
    for ts in timestamps:
        key = ts.date().isoformat()
        per_day[key] = per_day.get(key, 0) + 1

    days = []
    for offset in range(TREND_DAYS - 1, -1, -1):
        day = (today - timedelta(days=offset)).date()
        days.append({
            "date": day.isoformat(),
            "day": day.strftime("%a"),
            "count": per_day.get(day.isoformat(), 0),
        })
    return days


def get_dashboard(db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or utcnow()
    window_start = (now - timedelta(days=TREND_DAYS - 1)).replace(hour=0, minute=0, second=0, microsecond=0)

    stats = {
        "totalCandidates": db.query(func.count(Candidate.id)).scalar() or 0,
        "totalSubmissions": db.query(func.count(Submission.id)).scalar() or 0,
        "totalProblems": db.query(func.count(Problem.id)).scalar() or 0,
        "totalDepartments": db.query(func.count(Department.id)).scalar() or 0,
        "totalPositions": db.query(func.count(Position.id)).scalar() or 0,
        "totalStacks": db.query(func.count(Stack.id)).scalar() or 0,
        "submittedCandidates": db.query(func.count(Candidate.id)).filter(
            Candidate.submission_time.is_not(None)
        ).scalar() or 0,
        "startedCandidates": db.query(func.count(Candidate.id)).filter(
            Candidate.start_time.is_not(None), Candidate.submission_time.is_(None)
        ).scalar() or 0,
        "pendingCandidates": db.query(func.count(Candidate.id)).filter(
            Candidate.start_time.is_(None)
        ).scalar() or 0,
    }

    recent_candidates = (
        db.query(Candidate)
        .options(joinedload(Candidate.department), joinedload(Candidate.position))
        .order_by(Candidate.created_at.desc())
        .limit(RECENT_COUNT)
        .all()
    )
    recent_submissions = (
        db.query(Submission)
        .options(joinedload(Submission.candidate))
        .order_by(Submission.submission_time.desc())
        .limit(RECENT_COUNT)
        .all()
    )

    candidates_by_department = (
        db.query(Department.name, func.count(Candidate.id))
        .outerjoin(Candidate, Candidate.department_id == Department.id)
        .group_by(Department.id, Department.name)
        .order_by(Department.name.asc())
        .all()
    )
    problems_by_difficulty = (
        db.query(Problem.difficulty, func.count(Problem.id))
        .group_by(Problem.difficulty)
        .all()
    )

    submission_times = [
        row[0] for row in
        db.query(Submission.submission_time).filter(Submission.submission_time >= window_start).all()
    ]
    candidate_times = [
        row[0] for row in
        db.query(Candidate.created_at).filter(Candidate.created_at >= window_start).all()
    ]

    return {
        "stats": stats,
        "recentCandidates": [
            {
                "id": c.id,
                "name": c.name,
                "email": c.email,
                "state": c.state.value,
                "department": c.department.name if c.department else None,
                "position": c.position.name if c.position else None,
                "scheduledTime": as_aware_utc(c.scheduled_time),
            }
            for c in recent_candidates
        ],
        "recentSubmissions": [
            {
                "id": s.id,
                "candidateName": s.candidate.name if s.candidate else None,
                "submissionTime": as_aware_utc(s.submission_time),
                "remarkCount": len(s.remarks or []),
            }
            for s in recent_submissions
        ],
        "candidatesByDepartment": [
            {"name": name, "count": count} for name, count in candidates_by_department
        ],
        "problemsByDifficulty": [
            {"difficulty": difficulty.value, "count": count} for difficulty, count in problems_by_difficulty
        ],
        "submissionTrends": _daily_counts(submission_times, now),
        "candidateTrends": _daily_counts(candidate_times, now),
    }

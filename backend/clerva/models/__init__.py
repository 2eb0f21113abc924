from clerva.models.user import User
from clerva.models.subject import SkillLevel, Subject, UserSubject
from clerva.models.goal import Goal, GoalCategory, GoalStatus
from clerva.models.achievement import Achievement, UserAchievement
from clerva.models.study_session import SessionParticipant, SessionStatus, StudySession
from clerva.models.feedback import Feedback, FeedbackPriority, FeedbackStatus, FeedbackType
from clerva.models.study_group import GroupRole, StudyGroup, StudyGroupMember
from clerva.models.calendar_event import CalendarEvent, EventType

__all__ = [
    "User",
    "Subject",
    "UserSubject",
    "SkillLevel",
    "Goal",
    "GoalCategory",
    "GoalStatus",
    "Achievement",
    "UserAchievement",
    "StudySession",
    "SessionParticipant",
    "SessionStatus",
    "Feedback",
    "FeedbackType",
    "FeedbackStatus",
    "FeedbackPriority",
    "StudyGroup",
    "StudyGroupMember",
    "GroupRole",
    "CalendarEvent",
    "EventType",
]

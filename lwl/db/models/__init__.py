"""Database models package."""
from lwl.db.models.activity import UserDailyActivity
from lwl.db.models.bidirectional import (
    BidirectionalExercise,
    BidirectionalMasteredWord,
    BidirectionalReview,
)
from lwl.db.models.exercise import Exercise
from lwl.db.models.feedback import Feedback
from lwl.db.models.known_word import KnownWord
from lwl.db.models.promotion import PromoCodeUsage, PromotionalBanner
from lwl.db.models.sentence_mining import SentenceMiningExercise, SentenceMiningSession
from lwl.db.models.shadowing import ShadowingExercise, ShadowingProgress
from lwl.db.models.storage import StorageBucket
from lwl.db.models.subscription import Subscriber
from lwl.db.models.user import User, UserRole
from lwl.db.models.visitor import Visitor
from lwl.db.models.vocabulary import VocabularyItem

__all__ = [
    "User",
    "UserRole",
    "Exercise",
    "VocabularyItem",
    "KnownWord",
    "SentenceMiningSession",
    "SentenceMiningExercise",
    "BidirectionalExercise",
    "BidirectionalReview",
    "BidirectionalMasteredWord",
    "UserDailyActivity",
    "ShadowingExercise",
    "ShadowingProgress",
    "Subscriber",
    "PromotionalBanner",
    "PromoCodeUsage",
    "Feedback",
    "Visitor",
    "StorageBucket",
]

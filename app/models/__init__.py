# Models Package
from .user import User
from .profile import Profile
from .wallet import Wallet
from .transaction import Transaction
from .habit import Habit
from .habit_log import HabitLog
from .sponsored_habit import SponsoredHabit

__all__ = [
    "User",
    "Profile",
    "Wallet",
    "Transaction",
    "Habit",
    "HabitLog",
    "SponsoredHabit"
]

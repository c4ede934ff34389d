from sqlmodel import SQLModel
from .account import Account
from .role_assignment import RoleAssignment
from .profile import Profile
from .clinic import Clinic
from .pharmacy import Pharmacy
from .specialty import Specialty
from .doctor import Doctor
from .appointment import Appointment
from .medicine_order import MedicineOrder
from .stock_item import StockItem
from .health_record import HealthRecord, HealthSymptom, HealthMedicine
from .community_group import CommunityGroup, GroupMember
from .community_post import CommunityPost, PostLike
from .health_event import HealthEvent, EventParticipant

__all__ = [
    "SQLModel",
    "Account",
    "RoleAssignment",
    "Profile",
    "Clinic",
    "Pharmacy",
    "Specialty",
    "Doctor",
    "Appointment",
    "MedicineOrder",
    "StockItem",
    "HealthRecord",
    "HealthSymptom",
    "HealthMedicine",
    "CommunityGroup",
    "GroupMember",
    "CommunityPost",
    "PostLike",
    "HealthEvent",
    "EventParticipant",
]

from enum import Enum


class PizzaSize(str, Enum):
    small = "Small"
    medium = "Medium"
    large = "Large"
    extra_large = "Extra Large"


class PizzaCategory(str, Enum):
    vegetarian = "Vegetarian"
    non_vegetarian = "Non-Vegetarian"
    vegan = "Vegan"
    specialty = "Specialty"


class AddressType(str, Enum):
    home = "Home"
    work = "Work"
    other = "Other"


class ContactStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    resolved = "resolved"
    closed = "closed"


class ContactPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


DISTRICTS_BY_PROVINCE = {
    "Western": ["Colombo", "Gampaha", "Kalutara"],
    "Central": ["Kandy", "Matale", "Nuwara Eliya"],
    "Southern": ["Galle", "Matara", "Hambantota"],
    "Northern": ["Jaffna", "Kilinochchi", "Mannar", "Vavuniya", "Mullaitivu"],
    "Eastern": ["Batticaloa", "Ampara", "Trincomalee"],
    "North Western": ["Kurunegala", "Puttalam"],
    "North Central": ["Anuradhapura", "Polonnaruwa"],
    "Uva": ["Badulla", "Moneragala"],
    "Sabaragamuwa": ["Ratnapura", "Kegalle"],
}

PROVINCES = list(DISTRICTS_BY_PROVINCE)
DISTRICTS = [d for districts in DISTRICTS_BY_PROVINCE.values() for d in districts]

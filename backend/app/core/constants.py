"""
Centralized constants for roles, statuses and limits.

Change allowed values here instead of scattering literals across routes and services.
"""

# User roles, lowest to highest
ROLE_BASIC = "basic"
ROLE_SUBMITTER = "submitter"
ROLE_CURATOR = "curator"
ROLE_ADMIN = "admin"
ROLES = (ROLE_BASIC, ROLE_SUBMITTER, ROLE_CURATOR, ROLE_ADMIN)

SUBMITTER_ROLES = frozenset({ROLE_SUBMITTER, ROLE_CURATOR, ROLE_ADMIN})
CURATOR_ROLES = frozenset({ROLE_CURATOR, ROLE_ADMIN})
ADMIN_ROLES = frozenset({ROLE_ADMIN})

# Happening moderation
HAPPENING_PENDING = "pending"
HAPPENING_APPROVED = "approved"
HAPPENING_REJECTED = "rejected"
HAPPENING_STATUSES = (HAPPENING_PENDING, HAPPENING_APPROVED, HAPPENING_REJECTED)

# Event flags
FLAG_PENDING = "pending"
FLAG_RESOLVED = "resolved"
FLAG_REJECTED = "rejected"
FLAG_STATUSES = (FLAG_PENDING, FLAG_RESOLVED, FLAG_REJECTED)

# Attendance
ATTENDANCE_GOING = "going"
ATTENDANCE_MAYBE = "maybe_going"
ATTENDANCE_STATUSES = (ATTENDANCE_GOING, ATTENDANCE_MAYBE)

# Happening list sorting
HAPPENING_SORT_FIELDS = ("start_datetime", "created_at", "title")

# Hard caps so responses stay bounded
HAPPENINGS_LIST_LIMIT = 500
SCRAPE_LOGS_LIST_LIMIT = 200
FLAGS_LIST_LIMIT = 200

# Default client filter window: today through today + N days
DEFAULT_FILTER_WINDOW_DAYS = 7

# Haversine earth radius in miles
EARTH_RADIUS_MILES = 3958.8

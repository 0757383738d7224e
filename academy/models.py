"""
Academy Application Models Registry

Central models registry for the academy application. It imports and exposes
all models from the logical submodules so they are registered with Django's
ORM under the single `academy` app label.

Architecture:
- users/:          Profile (phone number, password reset code)
- courses/:        Course, CourseFile, InPersonCourse and course bookings
- consultations/:  Consultation slots and their bookings
- events/:         Event and EventRegistration
- content/:        FAQ and Podcast

The abstract PaidBooking base lives in payments/ and has no table.
"""

# Import all user-related models for registration with Django ORM
from .users.models import *

# Import all course-related models for registration with Django ORM
from .courses.models import *

# Import all consultation-related models for registration with Django ORM
from .consultations.models import *

# Import all event-related models for registration with Django ORM
from .events.models import *

# Import all content models (FAQs, podcasts) for registration with Django ORM
from .content.models import *

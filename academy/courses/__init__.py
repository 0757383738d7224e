"""
Academy Courses Package

Recorded and in-person courses, course material uploads and the two course
booking flows (recorded purchase, in-person seat booking).
"""

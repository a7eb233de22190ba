"""
Campus Placement Portal
Students register with their USN, admins publish targeted placement notices,
students see the notices they are eligible for.

Architecture:
- MongoDB: students, admins and notices
- Eligibility and statistics are computed per request, never stored
"""

__version__ = "1.0.0"

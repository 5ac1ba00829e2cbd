"""BIMCall - calendar import and export for BIM coordination meetings.

Parses ICS calendar files into meeting candidates, expands simple recurrence
rules into dated occurrences, exports meetings as ICS invitations, and imports
calendar events into a BIMCall server through its REST API.
"""

__version__ = "1.0.0"
__author__ = "BIMCall Team"

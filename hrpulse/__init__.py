"""HRPulse psychometrics service.

Scores candidate attempts at psychometric tests, attaches rule based
recommendations and links results to onboarding checklists.
"""

__version__ = "1.0.0"

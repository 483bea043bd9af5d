"""
Core business logic modules for GH Score.

Submodules:
- vacancies: Vacancy lifecycle, Kanban moves and SLA indicators
- pipeline: Candidate stage progression
- matching: Applicant-vacancy match scoring
- applications: Public portal intake and tracking
- notifications: Recruiter notification feed
- analytics: Dashboard KPIs
- organizations: Company and site reference data
- auth: Sessions and roles
- errors: Error taxonomy shared by all of the above
"""

"""Trade Job Tracker package.

Organized by feature modules (users, crews, jobs, job_logs, hours, payroll, ...)
with a thin Flask controller layer over service and repository layers. All
state lives in a managed Postgres backend reached over its REST API.
"""

from jobsearch.models.job import Job, OPEN_STATUS
from jobsearch.models.tag import Tag, job_tags

__all__ = ["Job", "OPEN_STATUS", "Tag", "job_tags"]

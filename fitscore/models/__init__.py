from .skill import Skill, candidate_skills
from .candidate import Candidate

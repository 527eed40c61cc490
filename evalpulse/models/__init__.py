"""Database models."""

from evalpulse.models.user import User
from evalpulse.models.eval_config import EvalConfig, RunPolicy
from evalpulse.models.evaluation import Evaluation

__all__ = ["User", "EvalConfig", "RunPolicy", "Evaluation"]

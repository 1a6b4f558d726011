"""Request boundary: analysis sessions and the GreenBuild facade."""

from greenbuild.api.facade import GreenBuild
from greenbuild.api.session import AnalysisResult, AnalysisSession

__all__ = ["AnalysisResult", "AnalysisSession", "GreenBuild"]

"""
FastAPI Dependencies for StudyFlow.

The StudySession is created by the application factory and stored on
``app.state``; routes receive it through this dependency.
"""

from fastapi import Request

from src.services.study_session import StudySession


async def get_study_session(request: Request) -> StudySession:
    """Dependency returning the application's StudySession."""
    return request.app.state.study_session

"""Start the Interview Coach API with uvicorn."""
import uvicorn

from interview_coach.config import settings

if __name__ == "__main__":
    uvicorn.run("interview_coach.main:app", host=settings.host, port=settings.port, reload=True)

from syllabus_calendar.cli import app

if __name__ == "__main__":
    app()

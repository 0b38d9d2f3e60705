# WSGI entry point for production servers (Gunicorn, Waitress, ...).
#
#   gunicorn -w 4 -b 0.0.0.0:5000 wsgi:app

from src.attendance_tracker.attendance_tracker.main import create_app

app = create_app()

if __name__ == "__main__":
    app.run()

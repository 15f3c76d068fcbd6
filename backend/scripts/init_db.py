"""Initialize the database - creates all tables and the first admin user."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import engine, Base, SessionLocal
import app.models  # noqa: F401 - registers all models
from app.models.user import User


def init_db(admin_emp_id: str = "admin001"):
    print("Creating all database tables...")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if not db.query(User).filter(User.emp_id == admin_emp_id).first():
            db.add(User(emp_id=admin_emp_id, name="Admin", role="admin"))
            db.commit()
            print(f"Seeded admin user '{admin_emp_id}'.")
    finally:
        db.close()
    print("Database initialized successfully.")


if __name__ == "__main__":
    init_db(*sys.argv[1:2])

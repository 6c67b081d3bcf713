import pg8000.native
import urllib.parse
from config import Config
from services.logger import get_logger

logger = get_logger('database')

def get_db_connection():
    db_url = Config.DATABASE_URL
    if db_url:
        parsed = urllib.parse.urlparse(db_url)
        return pg8000.native.Connection(user=parsed.username,
                                        password=parsed.password,
                                        host=parsed.hostname,
                                        port=parsed.port or 5432,
                                        database=parsed.path[1:])
    return pg8000.native.Connection(user=Config.DB_USER,
                                    password=Config.DB_PASSWORD,
                                    host=Config.DB_HOST,
                                    port=Config.DB_PORT,
                                    database=Config.DB_NAME)

def init_db():
    """Create the catalog and registration tables if they are missing"""
    try:
        conn = get_db_connection()
    except Exception as e:
        logger.error(f"Database Initialization Error: {e}")
        return

    try:
        # Categories table
        conn.run('''CREATE TABLE IF NOT EXISTS course_categories (
                      id SERIAL PRIMARY KEY,
                      category_name TEXT NOT NULL
                    )''')

        # Coupons table
        conn.run('''CREATE TABLE IF NOT EXISTS coupons (
                      id SERIAL PRIMARY KEY,
                      couponcode TEXT NOT NULL UNIQUE,
                      discount INTEGER NOT NULL,
                      start_date DATE,
                      end_date DATE
                    )''')

        # Courses table
        conn.run('''CREATE TABLE IF NOT EXISTS courses (
                      id SERIAL PRIMARY KEY,
                      course TEXT NOT NULL,
                      coursedetails TEXT,
                      courseduration TEXT,
                      fee NUMERIC(10, 2) NOT NULL DEFAULT 0,
                      coursecategory INTEGER REFERENCES course_categories(id) ON DELETE SET NULL,
                      coursecouponid INTEGER REFERENCES coupons(id) ON DELETE SET NULL,
                      courseimage TEXT
                    )''')

        # Migration: fee column was added after the first catalog import
        try:
            conn.run("ALTER TABLE courses ADD COLUMN IF NOT EXISTS fee NUMERIC(10, 2) NOT NULL DEFAULT 0")
        except pg8000.native.DatabaseError as e:
            logger.warning(f"Skipping courses.fee migration: {e}")

        # Registrations table
        conn.run('''CREATE TABLE IF NOT EXISTS registrations (
                      id SERIAL PRIMARY KEY,
                      first_name TEXT NOT NULL,
                      last_name TEXT NOT NULL,
                      dob TEXT NOT NULL,
                      mobile TEXT NOT NULL,
                      email TEXT NOT NULL,
                      message TEXT,
                      course TEXT NOT NULL,
                      amount NUMERIC(10, 2) NOT NULL,
                      payment_status TEXT NOT NULL DEFAULT 'Pending',
                      order_id TEXT UNIQUE,
                      payment_id TEXT,
                      created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                      updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                    )''')

        logger.info("Connected to PostgreSQL and tables ready.")
    except Exception as e:
        logger.error(f"Database Initialization Error: {e}")
    finally:
        conn.close()

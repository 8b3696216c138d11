# helpdesk/security.py
from passlib.context import CryptContext

# Use argon2 for password hashing
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

# Hash password
def get_password_hash(password: str):
    return pwd_context.hash(password)

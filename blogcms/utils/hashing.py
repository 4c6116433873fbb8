from passlib.context import CryptContext

from blogcms.exceptions import PasswordTooLong

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


def _check_bcrypt_len(password: str):
    if len(password.encode("utf-8")) > 72:
        raise PasswordTooLong()


def hash_password(password: str) -> str:
    _check_bcrypt_len(password)
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    _check_bcrypt_len(plain_password)
    return pwd_context.verify(plain_password, hashed_password)

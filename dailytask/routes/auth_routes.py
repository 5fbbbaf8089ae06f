import secrets

from flask import Blueprint, current_app, jsonify, request
from werkzeug.security import check_password_hash, generate_password_hash

from dailytask.errors import DuplicateEmail, NotFound, ValidationFailure
from dailytask.stores.otp_store import OtpStore
from dailytask.stores.user_store import UserStore
from dailytask.utils.auth import issue_token
from dailytask.utils.db import get_db, utcnow
from dailytask.utils.mailer import send_reset_code
from dailytask.utils.normalize import creation_date, normalize_email, normalize_name

MIN_PASSWORD_LENGTH = 6

auth_bp = Blueprint("auth", __name__)


def _body():
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _required(payload, *names):
    values = []
    missing = []
    for name in names:
        value = payload.get(name)
        if not isinstance(value, str) or not value.strip():
            missing.append(name)
        values.append(value)
    if missing:
        raise ValidationFailure(f"Missing required fields: {', '.join(missing)}")
    return values


def _check_password(password):
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailure(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def _otp_store():
    return OtpStore(get_db(), ttl_seconds=current_app.config["OTP_TTL_SECONDS"])


@auth_bp.post("/register")
def register():
    name, email, password = _required(_body(), "name", "email", "password")
    _check_password(password)
    email = normalize_email(email)

    users = UserStore(get_db())
    if users.find_by_email(email) is not None:
        raise DuplicateEmail()

    created = creation_date(utcnow(), current_app.config["USER_DATE_UTC_OFFSET_MINUTES"])
    user = users.create(normalize_name(name), email, generate_password_hash(password), created)
    current_app.logger.info("Registered user id=%s", user.id)

    return jsonify(
        message="User registered successfully",
        token=issue_token(user),
        user=user.public_dict(include_created=True),
    ), 201


@auth_bp.post("/login")
def login():
    payload = _body()
    email, password = payload.get("email"), payload.get("password")
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationFailure("Invalid credentials")

    user = UserStore(get_db()).find_by_email(email)
    if user is None or not check_password_hash(user.password, password):
        raise ValidationFailure("Invalid credentials")

    return jsonify(message="Login successful", token=issue_token(user), user=user.public_dict()), 200


@auth_bp.post("/forgot-password")
def forgot_password():
    (email,) = _required(_body(), "email")
    email = normalize_email(email)

    if UserStore(get_db()).find_by_email(email) is None:
        raise NotFound("User not found")

    code = str(secrets.randbelow(900000) + 100000)
    otps = _otp_store()
    otps.put(email, code)
    send_reset_code(
        current_app.extensions["mailer"],
        email,
        code,
        current_app.config["OTP_TTL_SECONDS"],
    )
    current_app.logger.info("Reset code sent")
    return jsonify(message="OTP sent to your email"), 200


@auth_bp.post("/reset-password")
def reset_password():
    payload = _body()
    otp = payload.get("otp")
    if isinstance(otp, int) and not isinstance(otp, bool):
        # Codes are numeric, some clients send them as JSON numbers
        payload["otp"] = str(otp)
    email, otp, new_password = _required(payload, "email", "otp", "newPassword")
    _check_password(new_password)
    email = normalize_email(email)

    otps = _otp_store()
    if otps.find(email, otp) is None:
        raise ValidationFailure("Invalid or expired OTP")

    UserStore(get_db()).update_password(email, generate_password_hash(new_password))
    otps.delete(email, otp)
    return jsonify(message="Password reset successful"), 200

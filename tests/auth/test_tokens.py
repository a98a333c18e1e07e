import datetime

import jwt

from brand_attendance.auth.tokens import decode_token, issue_token
from brand_attendance.users.model import AuthUser

USER = AuthUser(id=7, username="jdoe", full_name="J Doe", group_id=4)


def test_issue_and_decode():
    token = issue_token(USER, secret="s3cret", expires_hours=2)
    payload = decode_token(token, secret="s3cret")
    assert payload["userId"] == 7
    assert payload["username"] == "jdoe"
    assert payload["groupId"] == 4


def test_wrong_secret_is_rejected():
    token = issue_token(USER, secret="s3cret")
    assert decode_token(token, secret="other") is None


def test_expired_token_is_rejected():
    expired = jwt.encode(
        {"userId": 7, "exp": datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(minutes=1)},
        "s3cret",
        algorithm="HS256",
    )
    assert decode_token(expired, secret="s3cret") is None
    assert decode_token("garbage", secret="s3cret") is None

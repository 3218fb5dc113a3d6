import os
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError

ALGORITHM = "HS256"

bearer_scheme_required = HTTPBearer(auto_error=True)


def get_current_user_required(token: HTTPAuthorizationCredentials = Depends(bearer_scheme_required)):
    try:
        payload = jwt.decode(
            token.credentials,
            os.getenv("JWT_SECRET"),
            algorithms=[ALGORITHM],
        )
        return payload
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def get_caller(current_user=Depends(get_current_user_required)) -> str:
    # The token subject is the account every ledger call acts as
    account = current_user.get("sub")

    if not account:
        raise HTTPException(status_code=401, detail="Token has no subject")

    return str(account)

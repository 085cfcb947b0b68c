# seminar_hall/routes/auth.py
"""
Account routes: signup with the pre-approval gate, login, and the admin
screens that approve accounts and manage pre-approved emails.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import auth_utils
from ..db import get_db
from ..models.preapproved_user import PreapprovedUser
from ..models.user import User, UserRole, UserStatus
from ..schemas.auth import LoginRequest, SignupResponse, Token
from ..schemas.user import (
    DeleteResponse,
    PreapprovedUserCreate,
    PreapprovedUserOut,
    UserCreate,
    UserDecision,
    UserDecisionResponse,
    UserOut,
)
from ..utils.notification_service import NotificationService, user_snapshot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

admin_required = auth_utils.admin_required

DEFAULT_SIGNUP_ROLE = UserRole.faculty


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(user_in: UserCreate, response: Response, background_tasks: BackgroundTasks,
           db: Session = Depends(get_db)):
    existing_user = auth_utils.get_user_by_email(db, user_in.email)
    if existing_user:
        if existing_user.status == UserStatus.pending:
            raise HTTPException(
                status_code=400,
                detail="User with this email has already registered and is awaiting approval.")
        raise HTTPException(status_code=400, detail="User with this email already exists.")

    preapproved = db.query(PreapprovedUser).filter(
        PreapprovedUser.email == user_in.email).first()
    if preapproved and preapproved.is_registered:
        raise HTTPException(
            status_code=400, detail="This pre-approved email has already been registered.")

    user = User(
        name=user_in.name.strip(),
        email=user_in.email,
        password_hash=auth_utils.get_password_hash(user_in.password),
    )
    if preapproved:
        user.role = preapproved.role
        user.status = UserStatus.approved
        preapproved.is_registered = True
    else:
        user.role = DEFAULT_SIGNUP_ROLE
        user.status = UserStatus.pending

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="User with this email already exists.")
    except Exception as e:
        logger.error(f"Signup error: {e}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Server error during signup.")

    if user.status == UserStatus.approved:
        logger.info(f"Pre-approved user '{user.email}' registered with role '{user.role.value}'")
        return {
            "message": "Signup successful. You are now logged in.",
            "status": user.status.value,
            "access_token": auth_utils.create_user_token(user),
            "token_type": "bearer",
            "role": user.role.value,
        }

    logger.info(
        f"New user '{user.email}' registered with role '{user.role.value}' and status 'pending'. Admin approval needed.")
    background_tasks.add_task(NotificationService.signup_pending, user_snapshot(user))
    response.status_code = status.HTTP_202_ACCEPTED
    return {
        "message": "Signup successful. Your account is awaiting admin approval.",
        "status": user.status.value,
    }


@router.post("/login", response_model=Token)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = auth_utils.get_user_by_email(db, request.email)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid credentials.")

    if user.status == UserStatus.pending:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account pending admin approval. Please wait for activation.")
    if user.status == UserStatus.rejected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account registration rejected. Please contact support.")

    if not auth_utils.verify_password(request.password, user.password_hash):
        logger.info(f"Failed login for {request.email}")
        raise HTTPException(status_code=400, detail="Invalid credentials.")

    return {
        "access_token": auth_utils.create_user_token(user),
        "token_type": "bearer",
        "role": user.role.value,
    }


@router.get("/me", response_model=UserOut)
def get_me(current: User = Depends(auth_utils.get_current_approved_user)):
    return current


# --- Admin User Management Routes ---

@router.get("/admin/users/pending", response_model=List[UserOut],
            dependencies=[Depends(admin_required)])
def list_pending_users(db: Session = Depends(get_db)):
    return db.query(User).filter(
        User.status == UserStatus.pending
    ).order_by(User.id.asc()).all()


def _decide_pending_user(db: Session, user_id: int, new_status: UserStatus) -> User:
    user = db.query(User).filter(
        User.id == user_id,
        User.status == UserStatus.pending
    ).first()
    if not user:
        raise HTTPException(
            status_code=404, detail="User not found or not in pending status.")

    user.status = new_status
    try:
        db.commit()
        db.refresh(user)
    except Exception as e:
        logger.error(f"Error updating user {user_id} to {new_status.value}: {e}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Server error updating user.")
    return user


@router.put("/admin/users/{user_id}/approve", response_model=UserDecisionResponse,
            dependencies=[Depends(admin_required)])
def approve_user(user_id: int, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    user = _decide_pending_user(db, user_id, UserStatus.approved)
    logger.info(f"User {user.email} approved.")
    background_tasks.add_task(NotificationService.account_approved, user_snapshot(user))
    return {"message": "User approved successfully.", "user": UserOut.model_validate(user)}


@router.put("/admin/users/{user_id}/reject", response_model=UserDecisionResponse,
            dependencies=[Depends(admin_required)])
def reject_user(user_id: int, background_tasks: BackgroundTasks,
                decision: Optional[UserDecision] = None, db: Session = Depends(get_db)):
    user = _decide_pending_user(db, user_id, UserStatus.rejected)
    logger.info(f"User {user.email} rejected.")
    background_tasks.add_task(
        NotificationService.account_rejected, user_snapshot(user),
        decision.reason if decision else None)
    return {"message": "User rejected successfully.", "user": UserOut.model_validate(user)}


# --- Pre-approved emails ---

@router.get("/admin/preapproved", response_model=List[PreapprovedUserOut],
            dependencies=[Depends(admin_required)])
def list_preapproved(db: Session = Depends(get_db)):
    return db.query(PreapprovedUser).order_by(PreapprovedUser.id.asc()).all()


@router.post("/admin/preapproved", response_model=PreapprovedUserOut,
             status_code=status.HTTP_201_CREATED, dependencies=[Depends(admin_required)])
def add_preapproved(entry: PreapprovedUserCreate, db: Session = Depends(get_db)):
    existing = db.query(PreapprovedUser).filter(
        PreapprovedUser.email == entry.email).first()
    if existing:
        raise HTTPException(status_code=409, detail="This email is already pre-approved.")

    # An email that already has an account cannot be consumed again at signup
    already_registered = auth_utils.get_user_by_email(db, entry.email) is not None
    obj = PreapprovedUser(name=entry.name.strip(), email=entry.email,
                          role=entry.role, is_registered=already_registered)
    db.add(obj)
    db.commit()
    db.refresh(obj)
    logger.info(f"Pre-approved {obj.email} as {obj.role.value}")
    return obj


@router.delete("/admin/preapproved/{entry_id}", response_model=DeleteResponse,
               dependencies=[Depends(admin_required)])
def delete_preapproved(entry_id: int, db: Session = Depends(get_db)):
    obj = db.query(PreapprovedUser).filter(PreapprovedUser.id == entry_id).first()
    if not obj:
        raise HTTPException(status_code=404, detail="Pre-approved entry not found.")
    email = obj.email
    db.delete(obj)
    db.commit()
    return {"message": f"Pre-approved email {email} removed."}

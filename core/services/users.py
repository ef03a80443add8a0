from typing import Optional

from django.db import transaction
from django.contrib.auth import get_user_model
from rest_framework.exceptions import NotFound

User = get_user_model()


def format_user(user: Optional[User]) -> Optional[dict]:
    """Public JSON form of a user; ``_id`` mirrors the client's key."""
    if user is None:
        return None
    return {
        '_id': user.id,
        'role': user.role,
        'name': user.name,
        'organisationName': user.organisation_name,
        'hospitalName': user.hospital_name,
        'email': user.email,
        'website': user.website,
        'address': user.address,
        'phone': user.phone,
        'createdAt': user.created_at.isoformat() if user.created_at else None,
        'updatedAt': user.updated_at.isoformat() if user.updated_at else None,
    }


def create_user(*, role, email, password, name='', organisationName='', hospitalName='',
                website='', address, phone) -> User:
    # username is the email; login and uniqueness both go through it
    return User.objects.create_user(
        username=email,
        email=email,
        password=password,
        role=role,
        name=name,
        organisation_name=organisationName,
        hospital_name=hospitalName,
        website=website,
        address=address,
        phone=phone,
    )


def users_with_role(role: str):
    return User.objects.filter(role=role).order_by('-created_at')


@transaction.atomic
def delete_user_with_role(user_id: int, role: str) -> User:
    """Delete a user of the given role or raise ``NotFound``.

    An organisation's inventory goes with it; donor/hospital references
    on other organisations' rows are nulled.
    """
    user = User.objects.filter(id=user_id, role=role).first()
    if not user:
        raise NotFound(f'No {role} found with id {user_id}')
    user.delete()
    return user

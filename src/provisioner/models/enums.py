"""Shared enums for models."""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant lifecycle status."""

    PENDING = "pending"
    PROVISIONING = "provisioning"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"


class ProvisioningProvider(str, Enum):
    """Backing infrastructure strategy used to provision a tenant."""

    MOCK = "mock"
    MANAGED = "managed"
    IAC = "iac"


class OnboardingStage(str, Enum):
    """Resumable signup checkpoints, declared in flow order."""

    SIGNUP_STARTED = "signup_started"
    EMAIL_VERIFIED = "email_verified"
    DATAROOM_CREATED = "dataroom_created"
    USE_CASE_SELECTED = "use_case_selected"
    WORKFLOW_SETUP = "workflow_setup"
    USERS_INVITED = "users_invited"
    PLAN_SELECTED = "plan_selected"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_COMPLETED = "payment_completed"
    PROVISIONING = "provisioning"
    ACTIVE = "active"


class InviteStatus(str, Enum):
    """Pending invite status."""

    PENDING = "pending"
    MIGRATED = "migrated"


class MembershipRole(str, Enum):
    """User role within a tenant database."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"

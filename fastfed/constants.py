"""Protocol constants shared across the handshake engine."""

from __future__ import annotations

from enum import Enum

# Delimiter used when building fully qualified member names for error messages.
PATH_DELIMITER = "."

# Wire member names. These are part of the protocol and must not change.
APPLICATION_PROVIDER = "application_provider"
APPLICATION_PROVIDER_METADATA_EXTENSIONS = "application_provider_metadata_extensions"
AUTHENTICATION_PROFILES = "authentication_profiles"
CAPABILITIES = "capabilities"
CONTRACT = "contract"
CONTRACT_PROPOSAL = "contract_proposal"
CONTRACT_PROPOSAL_CLOSURE_DATE = "closure_date"
CONTRACT_PROPOSAL_EXPIRATION_DATE = "expiration_date"
CONTRACT_PROPOSAL_STATUS = "status"
DESIRED_ATTRIBUTES = "desired_attributes"
DISPLAY_NAME = "display_name"
DISPLAY_SETTINGS = "display_settings"
EMAIL = "email"
ENABLED_PROFILES = "enabled_profiles"
ENTITY_ID = "entity_id"
FASTFED_HANDSHAKE_FINALIZE_URI = "fastfed_handshake_finalize_uri"
FASTFED_HANDSHAKE_REGISTER_URI = "fastfed_handshake_register_uri"
FASTFED_HANDSHAKE_START_URI = "fastfed_handshake_start_uri"
ICON_URI = "icon_uri"
IDENTITY_PROVIDER = "identity_provider"
IDENTITY_PROVIDER_METADATA_EXTENSIONS = "identity_provider_metadata_extensions"
JWKS_URI = "jwks_uri"
JWT_AUDIENCE = "aud"
JWT_EXPIRATION = "exp"
JWT_ISSUER = "iss"
LICENSE = "license"
LOGO_URI = "logo_uri"
OAUTH2_SCOPE = "scope"
OAUTH2_TOKEN_ENDPOINT = "token_endpoint"
OPTIONAL_GROUP_ATTRIBUTES = "optional_group_attributes"
OPTIONAL_USER_ATTRIBUTES = "optional_user_attributes"
ORGANIZATION = "organization"
PHONE = "phone"
PROVIDER_AUTHENTICATION_METHOD = "provider_authentication_method"
PROVIDER_AUTHENTICATION_METHODS = "provider_authentication_methods"
PROVIDER_CONTACT_INFORMATION = "provider_contact_information"
PROVIDER_DOMAIN = "provider_domain"
PROVISIONING_PROFILES = "provisioning_profiles"
REGISTRATION_REQUEST_EXTENSIONS = "registration_request_extensions"
REGISTRATION_RESPONSE_EXTENSIONS = "registration_response_extensions"
REQUIRED_GROUP_ATTRIBUTES = "required_group_attributes"
REQUIRED_USER_ATTRIBUTES = "required_user_attributes"
SAML_METADATA_URI = "saml_metadata_uri"
SCHEMA_GRAMMARS = "schema_grammars"
SCIM_CAN_SUPPORT_NESTED_GROUPS = "can_support_nested_groups"
SCIM_MAX_GROUP_MEMBERSHIP_CHANGES = "max_group_membership_changes"
SCIM_SERVICE_URI = "scim_service_uri"
SIGNING_ALGORITHMS = "signing_algorithms"

# Well-known profile URNs
ENTERPRISE_SAML = "urn:ietf:params:fastfed:1.0:authentication:saml:2.0:enterprise"
ENTERPRISE_SCIM = "urn:ietf:params:fastfed:1.0:provisioning:scim:2.0:enterprise"

# Schema grammars
SCIM_SCHEMA_GRAMMAR = "urn:ietf:params:fastfed:1.0:schemas:scim:2.0"
SCHEMA_GRAMMARS_SUPPORTED = (SCIM_SCHEMA_GRAMMAR,)

# Provider authentication protocols
OAUTH2_JWT_PROFILE = (
    "urn:ietf:params:fastfed:1.0:provider_authentication:oauth:2.0:jwt_profile"
)
PROVIDER_AUTHENTICATION_PROTOCOLS = (OAUTH2_JWT_PROFILE,)

FASTFED_LICENSE = "https://openid.net/intellectual-property/licenses/fastfed/1.0/"


class ExtensionPoint(str, Enum):
    """Places in the handshake where a profile may attach extension data."""

    IDENTITY_PROVIDER_METADATA = "identity_provider_metadata"
    APPLICATION_PROVIDER_METADATA = "application_provider_metadata"
    REGISTRATION_REQUEST = "registration_request"
    REGISTRATION_RESPONSE = "registration_response"

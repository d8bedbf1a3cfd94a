"""Response message templates shared by the services and routes."""

RETRIEVED = "{resource} retrieved successfully."
CREATED = "{resource} created successfully."
ALREADY_EXISTS = "{resource} already exists."
UPDATED = "{resource} updated successfully."
NOT_FOUND = "{resource} with id {id} not found."
DELETED = "{resource} with id {id} deleted successfully."

ACCESS_DENIED = "Access denied"
INVALID_REQUEST = "Invalid request"
INTERNAL_SERVER_ERROR = "Internal server error"

USER_NOT_FOUND = "Account does not exist. Please check your email address or username."
WRONG_PASSWORD = "Password is incorrect."
ACCOUNT_LOCKED = "Account not activated."

LOGIN_SUCCEEDED = "Token created successfully."
LOGOUT_SUCCEEDED = "Logged out successfully."
TOKEN_REFRESHED = "Access token refreshed successfully."
INVALID_REFRESH_TOKEN = "Invalid refresh token"
TOKEN_VERIFIED = "Token is valid."

CURRENT_PASSWORD_REQUIRED = "Please enter your current password to update information."
PASSWORD_CONFIRMATION_MISMATCH = "Password confirmation does not match."
ROLES_NOT_FOUND = "One or more roles do not exist."
PERMISSIONS_NOT_FOUND = "One or more permissions do not exist."
REFERENCE_NOT_FOUND = "{resource} references a record that does not exist."
PROTECTED_ROLE = "Cannot delete or rename the super admin role."
SUPER_ADMIN_GRANT_DENIED = "Only a super admin can grant the super admin role."

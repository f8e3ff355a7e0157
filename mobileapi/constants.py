"""
Constants for Mobile API
"""

# API Version
API_VERSION = "1.0.0"

# Pagination
DEFAULT_PAGE_SIZE = 15
PROFILE_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50

# Store Limits
HOME_STORES_LIMIT = 10
MAX_HOME_STORES_LIMIT = 20
PROFILE_PREVIEW_LIMIT = 10

# File Upload
ALLOWED_AVATAR_TYPES = ['image/jpeg', 'image/png']
ALLOWED_LOGO_TYPES = ['image/jpeg', 'image/png', 'image/webp']
ALLOWED_PROOF_TYPES = ['image/jpeg', 'image/png', 'image/webp']
ALLOWED_IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'webp']

# Rating
MIN_RATING = 1
MAX_RATING = 5

# Review
MIN_REVIEW_LENGTH = 8
MAX_REVIEW_LENGTH = 500
MAX_REPLY_LENGTH = 300

# Banners
SUPPORTED_LOCALES = ['en', 'ar', 'fr']

# Error Messages
ERROR_MESSAGES = {
    'invalid_credentials': 'Invalid credentials',
    'unauthenticated': 'Unauthenticated.',
    'forbidden': 'This action is unauthorized.',
    'not_found': 'Resource not found.',
    'throttled': 'Too Many Attempts.',
    'validation': 'The given data was invalid.',
    'no_email': 'No email address associated with this account',
    'email_already_verified': 'Email already verified',
    'invalid_verification_link': 'Invalid verification link',
    'avatar_failed': 'Failed to upload avatar.',
    'store_permission': 'You do not have permission to manage this store.',
    'review_limit': 'Daily review limit reached. You can submit up to {limit} reviews per day.',
    'store_limit': 'Daily store limit reached. You can submit up to {limit} stores per day.',
    'report_limit': 'Daily report limit reached. You can submit up to {limit} reports per day.',
    'review_exists': 'You have already reviewed this store',
    'review_update_forbidden': 'Not authorized to update this review.',
    'proof_forbidden': 'Not authorized to upload proof for this review.',
    'proof_exists': 'This review already has an approved proof.',
    'reply_store_unverified': 'Store must be verified to reply to reviews.',
    'reply_not_owner': 'Only store owners can reply to reviews.',
    'reply_exists': 'A reply already exists for this review.',
    'already_owner': 'You are already an owner of this store.',
    'claim_pending': 'You have already submitted a pending claim for this store.',
    'report_exists': 'You have already reported this content.',
    'notification_not_found': 'Notification not found',
}

# Success Messages
SUCCESS_MESSAGES = {
    'registered': 'User registered successfully.',
    'registered_verify': 'User registered successfully. Please check your email to verify your account.',
    'login_success': 'Login successful',
    'logout_success': 'Logged out successfully',
    'profile_updated': 'Profile updated successfully',
    'avatar_uploaded': 'Avatar uploaded successfully',
    'verification_resent': 'Verification email resent successfully',
    'email_verified': 'Email verified successfully',
    'store_created': 'Store created successfully',
    'store_updated': 'Store updated successfully',
    'logo_uploaded': 'Logo uploaded successfully',
    'links_updated': 'Store links updated successfully',
    'review_submitted': 'Review submitted successfully.',
    'review_submitted_proof': 'Review submitted. Please upload proof for approval.',
    'review_updated': 'Review updated successfully.',
    'proof_uploaded_high_risk': 'Proof uploaded successfully. Your review will be published after admin approval.',
    'proof_uploaded': 'Proof uploaded successfully. Once approved, your review will show a verified badge.',
    'reply_submitted': 'Reply submitted successfully.',
    'claim_submitted': 'Claim request submitted successfully. It will be reviewed by admin.',
    'report_submitted': 'Report submitted successfully. Thank you for helping keep our platform safe.',
    'notification_marked_read': 'Notification marked as read',
    'all_notifications_read': 'All notifications marked as read',
    'notification_deleted': 'Notification deleted',
    'risk_level_updated': 'Category risk level updated successfully.',
}

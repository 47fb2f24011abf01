"""Users app package.

Defines the email-based custom user model, dashboard admin access records
and password reset codes. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""

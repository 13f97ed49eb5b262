from app.core.validation import FieldRule

RULE_SETS = {
    "user.create": [
        FieldRule("name", model="name", required=True),
        FieldRule("email", model="email", required=True),
        FieldRule("password", model="password", required=True),
        FieldRule("role", model="role", required=True),
        FieldRule("school_id", model="id", custom_error="School id must be a valid Id"),
    ],
    "user.login": [
        FieldRule("email", model="email", required=True),
        FieldRule("password", type="string", required=True),
    ],
    "user.change_password": [
        FieldRule("old_password", type="string", required=True),
        FieldRule("new_password", model="password", required=True),
    ],
}

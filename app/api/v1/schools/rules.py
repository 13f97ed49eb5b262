from app.core.validation import FieldRule

RULE_SETS = {
    "school.create": [
        FieldRule("name", model="name", required=True),
        FieldRule("address", model="address", required=True),
        FieldRule("email", model="email", required=True),
        FieldRule("phone", model="phone", required=True),
        FieldRule("website", model="website"),
        FieldRule("logo", model="logo"),
    ],
    "school.update": [
        FieldRule("name", model="name"),
        FieldRule("email", model="email"),
        FieldRule("phone", model="phone"),
        FieldRule("address", model="address"),
        FieldRule("website", model="website"),
        FieldRule("logo", model="logo"),
    ],
    "school.assign_admin": [
        FieldRule("user_id", model="id", required=True, custom_error="User id must be a valid Id"),
        FieldRule("school_id", model="id", required=True, custom_error="School id must be a valid Id"),
    ],
}

from app.core.validation import FieldRule

RULE_SETS = {
    "student.enroll": [
        FieldRule("email", model="email", required=True),
        FieldRule("phone", model="phone", required=True),
        FieldRule("name", model="name", required=True),
        FieldRule("date_of_birth", model="date_of_birth", required=True),
        FieldRule("gender", model="gender", required=True),
        FieldRule("classroom_id", model="id", required=True, custom_error="Classroom id must be a valid Id"),
    ],
    "student.update": [
        FieldRule("email", model="email"),
        FieldRule("phone", model="phone"),
        FieldRule("name", model="name"),
        FieldRule("date_of_birth", model="date_of_birth"),
        FieldRule("gender", model="gender"),
        FieldRule("classroom_id", model="id", custom_error="Classroom id must be a valid Id"),
    ],
    "student.transfer": [
        FieldRule(
            "target_classroom_id",
            model="id",
            required=True,
            custom_error="Target classroom id must be a valid Id",
        ),
    ],
}

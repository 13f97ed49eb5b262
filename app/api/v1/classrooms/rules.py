from app.core.validation import FieldRule

RULE_SETS = {
    "classroom.create": [
        FieldRule("name", model="name", required=True),
        FieldRule("school_id", model="id", required=True, custom_error="School id must be a valid Id"),
        FieldRule("capacity", model="capacity", required=True),
        FieldRule("resources", model="resources"),
    ],
    "classroom.update": [
        FieldRule("capacity", model="capacity"),
        FieldRule("name", model="name"),
        FieldRule("resources", model="resources"),
    ],
    "classroom.add_resource": [
        FieldRule("type", model="name", required=True),
        FieldRule("name", model="name", required=True),
        FieldRule("quantity", model="quantity", required=True),
    ],
    "classroom.update_resource": [
        FieldRule("resource_id", model="id", required=True, custom_error="Resource id must be a valid Id"),
        FieldRule("type", model="name"),
        FieldRule("name", model="name"),
        FieldRule("quantity", model="quantity"),
    ],
}

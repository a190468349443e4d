class AppStatusCode:
    # Success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    CREATED_SUCCESSFULLY = "101"
    UPDATED_SUCCESSFULLY = "102"
    DELETED_SUCCESSFULLY = "103"

    # Client errors
    INVALID_INPUT = "200"
    REQUIRED_VALIDATION_ERROR = "201"
    NOT_FOUND = "202"
    ALREADY_EXISTS = "203"
    CAPACITY_EXCEEDED = "204"
    CAPACITY_BELOW_OCCUPANCY = "205"

    # Authentication
    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_TOKEN_EXPIRED = "301"
    AUTHENTICATION_USER_INVALID = "302"
    AUTHENTICATION_USER_INACTIVE = "303"
    AUTHENTICATION_FORBIDDEN = "304"

    # Server
    OPERATION_FAILED = "500"

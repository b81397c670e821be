"""HTTP status codes used by the dispatcher's response envelope."""

HTTP_200_OK = 200
HTTP_400_BAD_REQUEST = 400
HTTP_422_UNPROCESSABLE_ENTITY = 422
HTTP_500_INTERNAL_SERVER_ERROR = 500

HTTP_500_INTERNAL_SERVER_ERROR_MESSAGE = "Internal Server Error"

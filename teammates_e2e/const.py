"""
Constants shared with the application under test: cookie names, headers,
request parameter names and resource URIs.
"""

AUTH_COOKIE_NAME = "AUTH-TOKEN"


class HeaderNames:
    BACKDOOR_KEY = "Backdoor-Key"
    CSRF_KEY = "CSRF-Key"


class ParamsNames:
    USER_ID = "user"
    COURSE_ID = "courseid"
    FEEDBACK_SESSION_NAME = "fsname"
    FEEDBACK_QUESTION_ID = "questionid"
    FEEDBACK_RESPONSE_ID = "responseid"
    INSTRUCTOR_ID = "instructorid"
    INSTRUCTOR_EMAIL = "instructoremail"
    STUDENT_EMAIL = "studentemail"
    REGKEY = "key"
    ENTITY_TYPE = "entitytype"


class EntityType:
    INSTRUCTOR = "instructor"


class WebPageURIs:
    LOGOUT = "/logout"
    INSTRUCTOR_HOME_PAGE = "/web/instructor/home"


class ResourceURIs:
    DATABUNDLE = "/webapi/databundle"
    DATABUNDLE_DOCUMENTS = "/webapi/databundle/documents"
    ACCOUNT = "/webapi/account"
    COURSE = "/webapi/course"
    SESSION = "/webapi/session"
    BIN_SESSIONS = "/webapi/bin/sessions"
    QUESTIONS = "/webapi/questions"
    RESPONSES = "/webapi/responses"
    RESPONSE_COMMENT = "/webapi/responsecomment"
    INSTRUCTOR = "/webapi/instructor"
    STUDENT = "/webapi/student"

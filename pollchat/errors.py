class ChatError(Exception):
    ''' Базовый класс всех исключений пакета pollchat '''

class ConnectionFailed(ChatError):
    ''' Не удалось установить соединение с сервером '''

class ConnectionLost(ChatError):
    ''' Соединение с сервером разорвано во время сессии '''

class AuthenticationFailed(ChatError):
    ''' Сервер отклонил логин или пароль '''

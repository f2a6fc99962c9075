# booking/views_assistant.py
#
# Purpose:
# - AI assistant endpoints:
#   * GET  /api/assistant/suggestion  -> service suggestion for the session customer
#   * POST /api/assistant/chat        -> one chat turn; history kept on the session
#
# Notes:
# - Neither fails on the AI side. When Gemini is not configured or fails,
#   the assistant's fallback text is returned instead.
#
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .auth_views import current_customer
from .serializers import ChatMessageSerializer
from .services.assistant_service import ChatSession, SuggestionProvider
from .services.customer_directory import visit_history

CHAT_SESSION_KEY = "assistant_chat"
# Keep the stored conversation small (user + model turns)
CHAT_HISTORY_LIMIT = 20


class SuggestionView(APIView):
    def get(self, request):
        customer = current_customer(request)
        if customer is None:
            return Response({"detail": "Log in to get a personal suggestion."},
                            status=status.HTTP_401_UNAUTHORIZED)

        history = visit_history(customer)
        last_visit = history[0] if history else None
        text = SuggestionProvider().suggest(customer, last_visit, history=history)
        return Response({"suggestion": text})


class ChatView(APIView):
    def post(self, request):
        serializer = ChatMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        chat = ChatSession(history=request.session.get(CHAT_SESSION_KEY, []))
        reply = chat.send_message(serializer.validated_data["message"])
        request.session[CHAT_SESSION_KEY] = chat.history[-CHAT_HISTORY_LIMIT:]
        return Response({"reply": reply})

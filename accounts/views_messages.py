"""
Messagerie directe entre utilisateurs
"""
import logging

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_http_methods

from .decorators import api_login_required
from .forms import MessageForm
from .models import Message
from .utils import load_json, error_message

logger = logging.getLogger(__name__)


def _serialize_message(message):
    return {
        'id': message.id,
        'sender_id': message.sender_id,
        'receiver_id': message.receiver_id,
        'content': message.content,
        'is_read': message.is_read,
        'created_at': message.created_at.isoformat(),
    }


@require_http_methods(["GET", "POST"])
@api_login_required
def messages_root(request):
    if request.method == 'POST':
        return _send_message(request)
    return _list_conversations(request)


def _send_message(request):
    try:
        data = load_json(request)
    except ValidationError as e:
        return JsonResponse({'error': error_message(e)}, status=400)

    form = MessageForm({'receiver': data.get('receiver_id'), 'content': data.get('content') or ''})
    if not form.is_valid():
        return JsonResponse({
            'error': 'Données invalides',
            'fields': {field: [str(e) for e in errors] for field, errors in form.errors.items()},
        }, status=400)
    if form.cleaned_data['receiver'].id == request.user.id:
        return JsonResponse({'error': 'Vous ne pouvez pas vous écrire à vous-même'}, status=400)

    message = form.save(commit=False)
    message.sender = request.user
    message.save()
    logger.info(f"Message {message.id} envoyé de {request.user.id} à {message.receiver_id}")
    return JsonResponse({'message': _serialize_message(message)}, status=201)


def _list_conversations(request):
    """Dernier message de chaque conversation, avec le nombre de non-lus"""
    user = request.user
    messages = (
        Message.objects
        .filter(Q(sender=user) | Q(receiver=user))
        .select_related('sender', 'receiver')
        .order_by('-created_at', '-id')
    )
    conversations = {}
    for message in messages:
        other = message.receiver if message.sender_id == user.id else message.sender
        entry = conversations.get(other.id)
        if entry is None:
            entry = conversations[other.id] = {
                'user_id': other.id,
                'username': other.username,
                'last_message': _serialize_message(message),
                'unread_count': 0,
            }
        if message.receiver_id == user.id and not message.is_read:
            entry['unread_count'] += 1
    return JsonResponse({'conversations': list(conversations.values())})


@require_http_methods(["GET"])
@api_login_required
def conversation(request, user_id):
    other = get_object_or_404(User, pk=user_id)
    thread = Message.objects.filter(
        Q(sender=request.user, receiver=other) | Q(sender=other, receiver=request.user)
    ).order_by('created_at', 'id')
    return JsonResponse({
        'user_id': other.id,
        'username': other.username,
        'messages': [_serialize_message(m) for m in thread],
    })


@require_http_methods(["PATCH", "POST"])
@api_login_required
def mark_conversation_read(request, user_id):
    other = get_object_or_404(User, pk=user_id)
    updated = Message.objects.filter(sender=other, receiver=request.user, is_read=False).update(is_read=True)
    return JsonResponse({'success': True, 'updated': updated})

import click
from flask import Blueprint, jsonify, request
from bloodconnect.utils.chatbot import ChatSession, get_reply, WELCOME_MESSAGE, SUGGESTED_QUESTIONS

chat = Blueprint('chat', __name__)


@chat.route('/welcome')
def welcome():
    return jsonify({'message': WELCOME_MESSAGE, 'suggestions': SUGGESTED_QUESTIONS})


@chat.route('/message', methods=['POST'])
def message():
    data = request.get_json(silent=True) or {}
    text = data.get('message')
    if not isinstance(text, str) or not text.strip():
        return jsonify({'error': 'Message is required'}), 400
    return jsonify({'reply': get_reply(text)})


@click.command('chat')
def chat_command():
    """Talk to the donor assistant in the terminal."""
    session = ChatSession()
    for entry in session.open():
        click.echo(f"Assistant: {entry.text}\n")
    click.echo('Type a question, or "quit" to close the chat.')
    try:
        while True:
            text = click.prompt('You', default='', show_default=False)
            if text.strip().lower() in ('quit', 'exit'):
                break
            reply = session.send(text)
            if reply is not None:
                click.echo(f"\nAssistant: {reply.text}\n")
    except (EOFError, click.Abort):
        pass
    finally:
        session.close()
    click.echo('Chat closed.')

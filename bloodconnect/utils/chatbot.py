"""
Donor FAQ assistant.

Replies come from an ordered list of keyword rules. The first rule whose
keywords appear in the lower-cased question wins, so the order of ``RULES``
is part of the behaviour.
"""
from collections import namedtuple
from datetime import datetime

WELCOME_MESSAGE = (
    "Hello! I'm your BloodConnect assistant. I can provide basic information "
    "about blood donation. Ask me anything about eligibility, the donation "
    "process, safety or recovery."
)

SUGGESTED_QUESTIONS = [
    "What are the eligibility requirements?",
    "How does the donation process work?",
    "What are the health benefits?",
    "How often can I donate blood?",
    "Is blood donation safe?",
    "What should I do after donating?",
]

FALLBACK_REPLY = (
    "Thank you for your interest in blood donation! I can help with information about:\n"
    "• Eligibility requirements\n"
    "• The donation process\n"
    "• Health benefits\n"
    "• Blood types\n"
    "• Safety measures\n"
    "• Recovery after donation\n\n"
    "What specific question can I answer for you?"
)


def contains_any(*keywords):
    def predicate(text):
        return any(keyword in text for keyword in keywords)
    return predicate


Rule = namedtuple('Rule', ['topic', 'matches', 'reply'])

RULES = [
    Rule('eligibility', contains_any('eligib', 'qualif', 'require'),
         "To donate blood, you typically need to be 18-65 years old, weigh at least 50kg, "
         "be in good health, and not have any transmittable diseases. There should be at "
         "least 56 days between donations. Specific requirements may vary, so it's best to "
         "consult with our medical staff."),
    Rule('process', contains_any('process', 'how to donate', 'what happens'),
         "The blood donation process is simple and safe:\n\n"
         "1. Registration and health check\n"
         "2. Mini health screening (hemoglobin, blood pressure)\n"
         "3. Comfortable donation (takes 8-10 minutes)\n"
         "4. Rest and refreshments\n\n"
         "The entire process takes about 30-45 minutes. Your donation can save up to 3 lives!"),
    Rule('benefits', contains_any('benefit', 'why donate', 'good for'),
         "Blood donation benefits both recipients and donors! You help save lives while also "
         "getting a free health checkup. Donating blood can reduce iron overload, stimulate new "
         "blood cell production, and give you the satisfaction of making a life-saving "
         "difference in your community."),
    Rule('first_time', contains_any('first time', 'nervous', 'scared'),
         "It's completely normal to be nervous about your first donation! Our staff are trained "
         "to make you comfortable. Eat a good meal beforehand, stay hydrated, and remember that "
         "you're doing something amazing. Most donors say it's much easier than they expected!"),
    Rule('blood_types', contains_any('blood type', 'group', 'o+', 'a+', 'b+', 'ab+'),
         "All blood types are needed! O-negative is the universal donor for red blood cells, "
         "while AB-positive is the universal plasma donor. However, every blood type is precious "
         "and can save lives. We'll match your donation with patients who need your specific type."),
    Rule('frequency', contains_any('how often', 'frequency', 'wait'),
         "You can donate whole blood every 56 days (about 8 weeks). Male donors can donate up to "
         "4 times a year, and female donors up to 3 times a year. Platelet donations can be made "
         "more frequently. Your body replenishes the donated blood within a few weeks."),
    Rule('safety', contains_any('safe', 'sterile', 'clean'),
         "Blood donation is extremely safe! We use sterile, single-use equipment for every "
         "donation. All needles are used once and then properly disposed. Our staff follow "
         "strict hygiene protocols to ensure your safety throughout the process."),
    Rule('duration', contains_any('time', 'long', 'take'),
         "The actual blood donation takes only 8-10 minutes. With registration, health screening, "
         "and post-donation rest, the entire process typically takes 30-45 minutes. It's a small "
         "time commitment for such a life-saving act!"),
    Rule('pain', contains_any('pain', 'hurt', 'needle'),
         "Most donors describe the feeling as a quick pinch, similar to a mosquito bite. The "
         "discomfort is minimal and brief. Our staff are experts at making the experience as "
         "comfortable as possible. The life-saving impact far outweighs the momentary discomfort!"),
    Rule('recovery', contains_any('after', 'recover', 'rest'),
         "After donating, we recommend:\n"
         "• Rest for 10-15 minutes\n"
         "• Drink plenty of fluids\n"
         "• Avoid heavy lifting for 24 hours\n"
         "• Eat iron-rich foods\n"
         "Most people feel completely normal immediately after donation and can resume normal "
         "activities."),
]


def get_reply(message):
    text = message.lower()
    for rule in RULES:
        if rule.matches(text):
            return rule.reply
    return FALLBACK_REPLY


Message = namedtuple('Message', ['text', 'is_bot', 'timestamp'])


class ChatClosed(Exception):
    pass


class ChatSession:
    """
    closed -> open (welcome message added) -> question/reply turns -> closed.
    Closing throws the transcript away.
    """

    def __init__(self):
        self.is_open = False
        self.transcript = []

    def open(self):
        if self.is_open:
            return self.transcript
        self.is_open = True
        self.transcript = [Message(WELCOME_MESSAGE, True, datetime.now())]
        return self.transcript

    def send(self, text):
        if not self.is_open:
            raise ChatClosed('Open the chat before sending a message')
        if not text or not text.strip():
            return None
        self.transcript.append(Message(text, False, datetime.now()))
        reply = Message(get_reply(text), True, datetime.now())
        self.transcript.append(reply)
        return reply

    def close(self):
        self.is_open = False
        self.transcript = []

# =============================================================================
# core/services/conversation_service.py - Poster Wizard
# =============================================================================
# Drives the conversation that collects everything needed for a poster:
#
#   greeting       user describes the project   -> domain
#   domain         user picks a domain          -> details
#   details        user adds texts / mood       -> reference
#   reference      style image or "non"         -> colors
#   colors         palette (1-6 colors)         -> content_image
#   content_image  image to integrate or "non"  -> generating
#   generating     poster queued / retry        -> complete
#   complete       message = modification       -> generating
#
# Each operation mutates the Conversation in place, appends the user and
# assistant messages and returns it. Operations sent at the wrong step raise
# InvalidConversationStepError. Persistence is left to the caller
# (ConversationStore).
#
# Request and image analysis are fail-soft: if the AI gateway is down the
# wizard still advances, without the analysis.
# =============================================================================

import logging

from app.exceptions import InvalidConversationStepError
from agents.image_analyst import ImageAnalystAgent
from agents.request_analyst import RequestAnalystAgent
from core.models.conversation import (
    Conversation,
    ConversationMessage,
    ConversationState,
    ConversationStep,
    MessageRole,
)
from core.models.generation import (
    AspectRatio,
    Domain,
    GenerateImageRequest,
    OutputFormat,
    Resolution,
)
from lib.utils import ApplicationError, normalize_uuid

logger = logging.getLogger(__name__)


# =============================================================================
# Assistant Messages
# =============================================================================

WELCOME_MESSAGE = (
    "Bonjour ! 👋 Je suis votre assistant graphiste. Que souhaitez-vous créer aujourd'hui ? "
    "Décrivez-moi votre projet d'affiche en quelques mots."
)
ASK_DOMAIN_MESSAGE = (
    "Super projet ! 🎨 Pour mieux vous aider, veuillez sélectionner le domaine "
    "de votre affiche dans la liste ci-dessous :"
)
ASK_DETAILS_MESSAGE = (
    "Excellent choix ! Maintenant, donnez-moi plus de détails sur votre affiche : "
    "quel message voulez-vous transmettre, quels textes inclure, quelle ambiance souhaitez-vous ?"
)
ASK_REFERENCE_MESSAGE = (
    "Parfait ! Avez-vous une image de référence (une affiche existante dont vous aimez le style) ? "
    "Si oui, envoyez-la maintenant. Sinon, tapez 'non' ou 'passer'."
)
REFERENCE_NOT_ANALYZED_MESSAGE = (
    "Je n'ai pas pu analyser l'image, mais je l'ai bien reçue. Passons aux couleurs ! "
    "Choisissez une palette de couleurs pour votre affiche :"
)
REFERENCE_SKIPPED_MESSAGE = (
    "Pas de souci ! Choisissez maintenant une palette de couleurs pour personnaliser votre affiche :"
)
ASK_CONTENT_IMAGE_MESSAGE = (
    "Parfait ! Avez-vous une image spécifique que vous souhaitez intégrer dans l'affiche "
    "(photo d'un produit, personne, etc.) ? Si oui, envoyez-la. Sinon, tapez 'non' et je "
    "générerai une image adaptée au contexte."
)
GENERATING_MESSAGE = "Parfait ! J'ai tous les éléments. Génération de votre affiche en cours... 🎨"
GENERATING_WITHOUT_IMAGE_MESSAGE = (
    "Compris ! Je vais générer une image adaptée au contexte (avec des personnages africains "
    "si nécessaire). Génération de votre affiche en cours... 🎨"
)
MODIFICATION_MESSAGE = "Compris ! J'applique vos modifications. Génération de votre affiche en cours... 🎨"
COMPLETE_MESSAGE = (
    "🎉 Votre affiche est prête ! Vous pouvez la télécharger ci-dessous. "
    "Voulez-vous en créer une autre ou apporter des modifications ?"
)

SKIP_WORDS = {"non", "passer", "skip", "no"}

# Steps at which the output format can still be changed
FORMAT_STEPS = [
    ConversationStep.GREETING,
    ConversationStep.DOMAIN,
    ConversationStep.DETAILS,
    ConversationStep.REFERENCE,
    ConversationStep.COLORS,
    ConversationStep.CONTENT_IMAGE,
]


def is_skip_word(content: str) -> bool:
    """True for 'non', 'passer', 'skip', 'no' (case and punctuation ignored)."""
    return content.strip().strip(".!").strip().lower() in SKIP_WORDS


def _to_domain(value: str | None) -> Domain | None:
    try:
        return Domain(value) if value else None
    except ValueError:
        return None


# =============================================================================
# Prompt Composition
# =============================================================================

def build_generation_prompt(state: ConversationState) -> str:
    """
    Compose the generation prompt from the wizard state.

    Example:
        "Style de référence: <description>. Affiche de type church. Veillée de
        prière vendredi. Utiliser la palette de couleurs: #1E3A8A, #FFD700"
    """
    prompt = state.description or ""

    if state.domain:
        prompt = f"Affiche de type {state.domain.value}. {prompt}"

    if state.reference_description:
        prompt = f"Style de référence: {state.reference_description}. {prompt}"

    if state.color_palette:
        prompt = f"{prompt}. Utiliser la palette de couleurs: {', '.join(state.color_palette)}"

    if state.needs_content_image:
        prompt = f"{prompt}. Si l'affiche nécessite des personnes, utiliser des personnages africains."

    if state.modification_request:
        prompt = f"{prompt}. Modifications demandées: {state.modification_request}"

    return prompt


def build_generation_request(conversation: Conversation) -> GenerateImageRequest:
    """GenerateImageRequest for the conversation's current state."""
    state = conversation.state
    return GenerateImageRequest(
        prompt=build_generation_prompt(state),
        aspect_ratio=state.aspect_ratio,
        resolution=state.resolution,
        output_format=state.output_format,
        reference_image=state.reference_image,
        content_image=state.content_image,
        domain=state.domain,
    )


# =============================================================================
# Service
# =============================================================================

class ConversationService:
    """
    State machine of the poster wizard.

    Attributes:
        request_analyst: Analyzes the first project description
        image_analyst: Describes reference images
    """

    def __init__(
        self,
        request_analyst: RequestAnalystAgent | None = None,
        image_analyst: ImageAnalystAgent | None = None,
    ):
        self.request_analyst = request_analyst or RequestAnalystAgent()
        self.image_analyst = image_analyst or ImageAnalystAgent()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def add_message(
        conversation: Conversation,
        role: MessageRole,
        content: str,
        image: str | None = None,
    ) -> ConversationMessage:
        message = ConversationMessage(role=role, content=content, image=image)
        conversation.messages.append(message)
        return message

    @staticmethod
    def _require_step(
        conversation: Conversation,
        operation: str,
        *steps: ConversationStep,
    ) -> None:
        if conversation.state.step not in steps:
            raise InvalidConversationStepError(
                operation,
                conversation.state.step.value,
                [step.value for step in steps],
            )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @staticmethod
    def start(user_id: str) -> Conversation:
        """New conversation at `greeting` with the welcome message."""
        conversation = Conversation(user_id=normalize_uuid(user_id))
        ConversationService.add_message(conversation, MessageRole.ASSISTANT, WELCOME_MESSAGE)
        logger.info(f"Started conversation {conversation.id} for user {conversation.user_id}")
        return conversation

    @staticmethod
    def reset(conversation: Conversation) -> Conversation:
        """Back to `greeting` with only the welcome message (format kept at defaults)."""
        conversation.state = ConversationState()
        conversation.messages = []
        conversation.generated_image = None
        conversation.generated_image_id = None
        conversation.generation_task_id = None
        conversation.last_error = None
        ConversationService.add_message(conversation, MessageRole.ASSISTANT, WELCOME_MESSAGE)
        logger.info(f"Reset conversation {conversation.id}")
        return conversation

    # -------------------------------------------------------------------------
    # Free Text
    # -------------------------------------------------------------------------

    def handle_user_message(self, conversation: Conversation, content: str) -> Conversation:
        """
        Route a typed message according to the current step.

        Raises:
            InvalidConversationStepError: At domain, colors or generating
        """
        step = conversation.state.step
        content = content.strip()

        if step == ConversationStep.REFERENCE and is_skip_word(content):
            return self.skip_reference(conversation, message=content)
        if step == ConversationStep.CONTENT_IMAGE and is_skip_word(content):
            return self.skip_content_image(conversation, message=content)

        # At reference / content_image only an image or a skip word moves forward
        self._require_step(
            conversation,
            "send a message",
            ConversationStep.GREETING,
            ConversationStep.DETAILS,
            ConversationStep.COMPLETE,
        )

        self.add_message(conversation, MessageRole.USER, content)
        state = conversation.state

        if step == ConversationStep.GREETING:
            state.description = content
            self._analyze_request(conversation, content)
            state.step = ConversationStep.DOMAIN
            reply = ASK_DOMAIN_MESSAGE
            if state.suggested_domain:
                reply = f"{reply}\n(Suggestion : {state.suggested_domain.value})"
            self.add_message(conversation, MessageRole.ASSISTANT, reply)

        elif step == ConversationStep.DETAILS:
            state.description = f"{state.description}. {content}" if state.description else content
            state.step = ConversationStep.REFERENCE
            self.add_message(conversation, MessageRole.ASSISTANT, ASK_REFERENCE_MESSAGE)

        else:
            state.modification_request = content
            state.step = ConversationStep.GENERATING
            conversation.generation_task_id = None
            conversation.last_error = None
            self.add_message(conversation, MessageRole.ASSISTANT, MODIFICATION_MESSAGE)

        return conversation

    def _analyze_request(self, conversation: Conversation, content: str) -> None:
        try:
            response = self.request_analyst.analyze(content)
        except ApplicationError as e:
            logger.warning(f"Request analysis skipped for conversation {conversation.id}: {e.message}")
            return

        analysis = response.analysis
        conversation.state.suggested_domain = _to_domain(analysis.suggested_domain)
        conversation.state.extracted_info = analysis.extracted_info.model_dump(exclude_none=True)

    # -------------------------------------------------------------------------
    # Domain
    # -------------------------------------------------------------------------

    def select_domain(self, conversation: Conversation, domain: Domain) -> Conversation:
        self._require_step(conversation, "select a domain", ConversationStep.DOMAIN)

        self.add_message(conversation, MessageRole.USER, f"Domaine sélectionné : {domain.value}")
        conversation.state.domain = domain
        conversation.state.step = ConversationStep.DETAILS
        self.add_message(conversation, MessageRole.ASSISTANT, ASK_DETAILS_MESSAGE)
        return conversation

    # -------------------------------------------------------------------------
    # Reference Image
    # -------------------------------------------------------------------------

    def submit_reference_image(self, conversation: Conversation, image: str) -> Conversation:
        """Store the reference image and its style description (if analysis works)."""
        self._require_step(conversation, "submit a reference image", ConversationStep.REFERENCE)

        self.add_message(conversation, MessageRole.USER, "Image de référence envoyée", image=image)
        state = conversation.state
        state.reference_image = image

        try:
            description = self.image_analyst.describe(image)
        except ApplicationError as e:
            logger.warning(f"Reference analysis failed for conversation {conversation.id}: {e.message}")
            description = None

        if description:
            state.reference_description = description
            reply = (
                f"J'ai analysé votre image de référence ! Je note un style : {description[:100]}... "
                "Maintenant, choisissez une palette de couleurs pour personnaliser votre affiche :"
            )
        else:
            reply = REFERENCE_NOT_ANALYZED_MESSAGE

        state.step = ConversationStep.COLORS
        self.add_message(conversation, MessageRole.ASSISTANT, reply)
        return conversation

    def skip_reference(self, conversation: Conversation, message: str | None = None) -> Conversation:
        self._require_step(conversation, "skip the reference image", ConversationStep.REFERENCE)

        self.add_message(conversation, MessageRole.USER, message or "Pas d'image de référence")
        conversation.state.step = ConversationStep.COLORS
        self.add_message(conversation, MessageRole.ASSISTANT, REFERENCE_SKIPPED_MESSAGE)
        return conversation

    # -------------------------------------------------------------------------
    # Colors
    # -------------------------------------------------------------------------

    def confirm_colors(self, conversation: Conversation, colors: list[str]) -> Conversation:
        self._require_step(conversation, "confirm colors", ConversationStep.COLORS)

        self.add_message(conversation, MessageRole.USER, f"Couleurs choisies : {', '.join(colors)}")
        conversation.state.color_palette = colors
        conversation.state.step = ConversationStep.CONTENT_IMAGE
        self.add_message(conversation, MessageRole.ASSISTANT, ASK_CONTENT_IMAGE_MESSAGE)
        return conversation

    # -------------------------------------------------------------------------
    # Content Image
    # -------------------------------------------------------------------------

    def submit_content_image(self, conversation: Conversation, image: str) -> Conversation:
        self._require_step(conversation, "submit a content image", ConversationStep.CONTENT_IMAGE)

        self.add_message(conversation, MessageRole.USER, "Image de contenu envoyée", image=image)
        conversation.state.content_image = image
        conversation.state.needs_content_image = False
        conversation.state.step = ConversationStep.GENERATING
        self.add_message(conversation, MessageRole.ASSISTANT, GENERATING_MESSAGE)
        return conversation

    def skip_content_image(self, conversation: Conversation, message: str | None = None) -> Conversation:
        self._require_step(conversation, "skip the content image", ConversationStep.CONTENT_IMAGE)

        self.add_message(
            conversation,
            MessageRole.USER,
            message or "Pas d'image de contenu, générer automatiquement",
        )
        conversation.state.needs_content_image = True
        conversation.state.step = ConversationStep.GENERATING
        self.add_message(conversation, MessageRole.ASSISTANT, GENERATING_WITHOUT_IMAGE_MESSAGE)
        return conversation

    # -------------------------------------------------------------------------
    # Format
    # -------------------------------------------------------------------------

    def set_format(
        self,
        conversation: Conversation,
        aspect_ratio: AspectRatio | None = None,
        resolution: Resolution | None = None,
        output_format: OutputFormat | None = None,
    ) -> Conversation:
        """Change the output format; only before generation starts."""
        self._require_step(conversation, "change the format", *FORMAT_STEPS)

        state = conversation.state
        if aspect_ratio:
            state.aspect_ratio = aspect_ratio
        if resolution:
            state.resolution = resolution
        if output_format:
            state.output_format = output_format
        return conversation

    # -------------------------------------------------------------------------
    # Generation Outcome
    # -------------------------------------------------------------------------

    def require_generating(self, conversation: Conversation) -> None:
        self._require_step(conversation, "generate", ConversationStep.GENERATING)

    @staticmethod
    def mark_generation_queued(conversation: Conversation, task_id: str) -> Conversation:
        conversation.generation_task_id = task_id
        conversation.last_error = None
        return conversation

    def complete_generation(
        self,
        conversation: Conversation,
        image_url: str,
        image_id: str | None = None,
    ) -> Conversation:
        """Store the generated poster and move to `complete`."""
        conversation.generated_image = image_url
        conversation.generated_image_id = image_id
        conversation.last_error = None
        conversation.state.modification_request = None
        conversation.state.step = ConversationStep.COMPLETE
        self.add_message(conversation, MessageRole.ASSISTANT, COMPLETE_MESSAGE, image=image_url)
        logger.info(f"Conversation {conversation.id} complete")
        return conversation

    def fail_generation(self, conversation: Conversation, error: str) -> Conversation:
        """Stay at `generating` so the user can retry."""
        conversation.last_error = error
        conversation.generation_task_id = None
        conversation.state.step = ConversationStep.GENERATING
        self.add_message(
            conversation,
            MessageRole.ASSISTANT,
            f"Désolé, une erreur est survenue lors de la génération : {error}. Voulez-vous réessayer ?",
        )
        logger.warning(f"Generation failed for conversation {conversation.id}: {error}")
        return conversation

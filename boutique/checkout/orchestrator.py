"""
Orchestrateur du checkout: panier -> PaymentIntent -> UI de paiement -> commande.

Règles:
- Une commande n'est écrite qu'à la suite directe d'un résultat Completed.
- Failed / Cancelled: l'intent détenu est abandonné (secret client à usage unique)
  et un nouvel intent est préparé automatiquement.
- Écriture de commande réussie: panier vidé, intent abandonné.
- Écriture échouée: panier conservé, instantané de commande conservé pour
  retry_finalize (même identifiant de commande, aucun nouveau débit).
- Chaque prepare est versionné: un intent obtenu par un appel dépassé est ignoré.

Les appels distants passent par run_in_threadpool et reprennent sur la boucle
asyncio qui possède l'état du panier et de l'orchestrateur (écrivain unique).
"""
from typing import List, Optional
import logging

from starlette.concurrency import run_in_threadpool

from boutique.cart.models import CartLine, cart_total
from boutique.cart.store import CartStore
from boutique.checkout.results import PaymentCancelled, PaymentCompleted, PaymentFailed, PaymentResult
from boutique.checkout.state import CheckoutPhase, CheckoutState, transition
from boutique.commandes.models import Order, ShippingAddress, new_order_id
from boutique.errors import (
    CheckoutNotReady,
    FinalizeInProgress,
    InvalidTransition,
    OrderWriteError,
    PaymentGatewayError,
    PaymentNotConfirmed,
    StalePaymentResult,
)
from boutique.payments.amounts import to_minor_units
from boutique.payments.models import PaymentSheetConfig, PaymentSheetContext
from boutique.users.models import Customer

logger = logging.getLogger(__name__)

P = CheckoutPhase

# module boutique.checkout.orchestrator
class CheckoutOrchestrator:
    def __init__(self, *, cart: CartStore, gateway, ledger, currency: str, sheet_config: PaymentSheetConfig):
        self._cart = cart
        self._gateway = gateway
        self._ledger = ledger
        self._currency = currency
        self._sheet_config = sheet_config
        self.state = CheckoutState()
        self.customer: Optional[Customer] = None
        self.shipping_address = ShippingAddress()
        self.pending_order: Optional[Order] = None
        self.last_order: Optional[Order] = None
        self._prepared_lines: List[CartLine] = []
        self._issued_version = 0
        self._finalizing = False

    @property
    def finalizing(self) -> bool:
        return self._finalizing

    # --- Préparation de l'intent ---

    async def prepare(self, customer: Optional[Customer], shipping_address: Optional[ShippingAddress] = None) -> CheckoutState:
        """
        Prépare un PaymentIntent pour le total courant du panier.
        - Exige un client avec identifiant Stripe et un panier de total > 0 (CheckoutNotReady).
        - Succès: phase IntentReady, contexte de paiement disponible via present().
        - Échec passerelle: reste IntentPending sans contexte, PaymentGatewayError levée;
          un nouvel appel à prepare est sans risque.
        """
        return await self._prepare(customer, shipping_address, keep_error=False)

    async def _prepare(self, customer, shipping_address, *, keep_error: bool) -> CheckoutState:
        if customer is None:
            raise CheckoutNotReady("Client non authentifié")
        if not customer.payment_id:
            raise CheckoutNotReady("Client sans identifiant de paiement")
        lines = self._cart.get_all()
        total = cart_total(lines)
        if not lines or total <= 0:
            raise CheckoutNotReady("Panier vide")
        amount = to_minor_units(total, self._currency)
        if amount <= 0:
            raise CheckoutNotReady("Montant à payer nul")

        version = self._issued_version + 1
        self.state = transition(
            self.state,
            P.INTENT_PENDING,
            intent=None,
            error=self.state.error if keep_error else None,
            version=version,
        )
        self._issued_version = version
        if shipping_address is not None:
            self.shipping_address = shipping_address
        self.customer = customer
        self._prepared_lines = lines
        logger.info("checkout.prepare user_id=%s amount=%s %s version=%s", customer.id, amount, self._currency, version)

        try:
            intent = await run_in_threadpool(
                self._gateway.create_intent,
                customer.payment_id,
                amount,
                self._currency,
                {"user_id": customer.id},
            )
        except PaymentGatewayError:
            if version != self._issued_version:
                logger.info("checkout.prepare: échec d'un prepare dépassé ignoré version=%s", version)
                return self.state
            raise

        if version != self._issued_version:
            logger.info(
                "checkout.prepare: intent dépassé ignoré intent=%s version=%s courante=%s",
                intent.id, version, self._issued_version,
            )
            return self.state
        self.state = transition(self.state, P.INTENT_READY, intent=intent)
        return self.state

    def present(self) -> PaymentSheetContext:
        """Remet le contexte de paiement à l'UI (IntentReady -> AwaitingPaymentUI)."""
        if self.state.phase is not P.AWAITING_PAYMENT_UI:
            if not self.state.is_ready_to_pay:
                raise CheckoutNotReady("Paiement pas encore prêt")
            self.state = transition(self.state, P.AWAITING_PAYMENT_UI)
        intent = self.state.intent
        return PaymentSheetContext(
            client_secret=intent.client_secret,
            customer_id=intent.customer_id,
            payment_intent_id=intent.id,
            config=self._sheet_config,
            error=self.state.error,
        )

    # --- Résultat de l'UI de paiement ---

    async def on_payment_result(
        self, result: PaymentResult, intent_id: Optional[str] = None, *, verified: bool = False
    ) -> CheckoutState:
        """
        Applique le résultat de l'UI de paiement.
        - Completed: le statut de l'intent est relu chez Stripe (sauf verified=True,
          cas du webhook signé); tout statut autre que "succeeded" lève
          PaymentNotConfirmed et laisse l'UI de paiement ouverte.
        - Failed / Cancelled: l'intent est abandonné et un nouveau est préparé.
        """
        if self.state.phase is not P.AWAITING_PAYMENT_UI:
            raise InvalidTransition(self.state.phase.value, _target_phase(result).value)
        held = self.state.intent
        if intent_id and held is not None and intent_id != held.id:
            raise StalePaymentResult(f"Résultat pour l'intent {intent_id}, intent courant {held.id}")

        if isinstance(result, PaymentCompleted):
            if not verified:
                await self._confirm_with_gateway(held)
            self.state = transition(self.state, P.COMPLETED)
            logger.info("checkout: paiement confirmé intent=%s", held.id if held else None)
            return await self._finalize_order()

        if isinstance(result, PaymentFailed):
            self.state = transition(self.state, P.FAILED, intent=None, error=result.error)
            logger.warning("checkout: paiement échoué intent=%s error=%s", held.id if held else None, result.error)
        else:
            self.state = transition(self.state, P.CANCELLED, intent=None, error=None)
            logger.info("checkout: paiement annulé intent=%s", held.id if held else None)
        await self._rearm()
        return self.state

    async def _confirm_with_gateway(self, held) -> None:
        status = await run_in_threadpool(self._gateway.get_intent_status, held.id)
        if self.state.intent is not held:
            raise StalePaymentResult(f"L'intent {held.id} a été remplacé pendant la vérification")
        if status != "succeeded":
            logger.warning("checkout: completed refusé, intent=%s statut Stripe=%s", held.id, status)
            raise PaymentNotConfirmed(held.id, status)

    async def _rearm(self) -> None:
        try:
            await self._prepare(self.customer, None, keep_error=True)
        except PaymentGatewayError:
            logger.warning("checkout: nouvel intent indisponible, prepare à relancer")
        except CheckoutNotReady as e:
            logger.info("checkout: pas de nouvel intent (%s)", e)
            self.state = transition(self.state, P.IDLE, intent=None)

    # --- Finalisation ---

    def _order_lines(self) -> List[CartLine]:
        lines = self._cart.get_all()
        held = self.state.intent
        if held is None:
            return lines
        current = to_minor_units(cart_total(lines), self._currency) if lines else 0
        if current != held.amount and self._prepared_lines:
            logger.warning(
                "checkout: panier modifié pendant le paiement (panier=%s, débité=%s), commande sur le panier payé",
                current, held.amount,
            )
            return list(self._prepared_lines)
        return lines

    async def _finalize_order(self) -> CheckoutState:
        if self._finalizing:
            raise FinalizeInProgress("Une finalisation est déjà en cours")
        lines = self._order_lines()
        self.pending_order = Order(
            id=new_order_id(),
            user_id=self.customer.id,
            cart=lines,
            total=cart_total(lines),
            shipping_address=self.shipping_address,
        )
        return await self._write_pending_order()

    async def retry_finalize(self) -> CheckoutState:
        """Réécrit l'instantané conservé après un échec d'écriture (même id de commande)."""
        if self._finalizing:
            raise FinalizeInProgress("Une finalisation est déjà en cours")
        if self.state.phase is not P.ORDER_WRITE_FAILED or self.pending_order is None:
            raise InvalidTransition(self.state.phase.value, P.ORDER_PENDING.value)
        return await self._write_pending_order()

    async def _write_pending_order(self) -> CheckoutState:
        order = self.pending_order
        self.state = transition(self.state, P.ORDER_PENDING)
        self._finalizing = True
        try:
            await run_in_threadpool(self._ledger.write_order, order)
        except Exception as e:
            err = e if isinstance(e, OrderWriteError) else OrderWriteError(str(e), order_id=order.id)
            self.state = transition(self.state, P.ORDER_WRITE_FAILED, error=str(err))
            logger.error(
                "checkout: paiement capturé mais commande non enregistrée order_id=%s user_id=%s intent=%s",
                order.id, order.user_id, self.state.intent.id if self.state.intent else None,
            )
            if err is e:
                raise
            raise err from e
        finally:
            self._finalizing = False

        await self._cart.clear()
        self.last_order = order
        self.pending_order = None
        self._prepared_lines = []
        self.state = transition(self.state, P.ORDER_WRITTEN, intent=None, error=None)
        logger.info("checkout: commande enregistrée order_id=%s total=%s", order.id, order.total)
        return self.state

    def reset(self) -> CheckoutState:
        """Retour à Idle quand aucun paiement ni écriture n'est en suspens."""
        if self.state.phase is P.IDLE:
            return self.state
        version = self._issued_version + 1
        self.state = transition(self.state, P.IDLE, intent=None, error=None, version=version)
        self._issued_version = version
        return self.state


def _target_phase(result: PaymentResult) -> CheckoutPhase:
    if isinstance(result, PaymentCompleted):
        return P.COMPLETED
    if isinstance(result, PaymentFailed):
        return P.FAILED
    return P.CANCELLED

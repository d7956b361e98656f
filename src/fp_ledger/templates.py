"""Cadence transaction and script templates for the FlowPonder contract.

Imports use placeholder addresses (`0xFlowPonder`, `0xFlowToken`,
`0xFungibleToken`) that `ScriptTemplate.render` swaps for the configured
contract accounts, so one template set serves emulator, testnet and mainnet.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScriptTemplate:
    name: str
    cadence: str
    is_transaction: bool = False

    def render(self, addresses: dict[str, str]) -> str:
        code = self.cadence
        # Longest placeholder first so 0xFlowPonder never clobbers a prefix of another alias
        for alias in sorted(addresses, key=len, reverse=True):
            code = code.replace(alias, addresses[alias])
        return code


_BORROW_PUBLIC = """
        let publicAccount = getAccount(0xFlowPonder)
        let ponderRef = publicAccount.getCapability(FlowPonder.PonderPublicPath)
          .borrow<&FlowPonder.PonderManager{FlowPonder.PonderPublic}>()
          ?? panic("Could not borrow PonderManager")
"""

# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

CREATE_PONDER = ScriptTemplate(
    name="create_ponder",
    is_transaction=True,
    cadence="""
import FlowPonder from 0xFlowPonder
import FlowToken from 0xFlowToken

transaction(
    question: String,
    description: String,
    options: [String],
    durationHours: UFix64,
    minBet: UFix64,
    maxBet: UFix64,
    category: String
) {
    let ponderManager: &FlowPonder.PonderManager
    let flowVault: &FlowToken.Vault

    prepare(signer: AuthAccount) {
        if signer.borrow<&FlowPonder.PonderManager>(from: FlowPonder.PonderStoragePath) == nil {
            let manager <- FlowPonder.createPonderManager()
            signer.save(<-manager, to: FlowPonder.PonderStoragePath)
            signer.link<&FlowPonder.PonderManager{FlowPonder.PonderPublic}>(
                FlowPonder.PonderPublicPath,
                target: FlowPonder.PonderStoragePath
            )
        }
        self.ponderManager = signer.borrow<&FlowPonder.PonderManager>(
            from: FlowPonder.PonderStoragePath
        ) ?? panic("Could not borrow PonderManager")
        self.flowVault = signer.borrow<&FlowToken.Vault>(
            from: /storage/flowTokenVault
        ) ?? panic("Could not borrow FlowToken vault")
    }

    execute {
        let payment <- self.flowVault.withdraw(amount: 1.0)
        self.ponderManager.createPonder(
            question: question,
            description: description,
            options: options,
            durationHours: durationHours,
            minBet: minBet,
            maxBet: maxBet,
            category: category,
            payment: <-payment
        )
    }
}
""",
)

PLACE_VOTE = ScriptTemplate(
    name="place_vote",
    is_transaction=True,
    cadence="""
import FlowPonder from 0xFlowPonder
import FlowToken from 0xFlowToken

transaction(ponderId: UInt64, option: UInt8, amount: UFix64) {
    let ponderManager: &FlowPonder.PonderManager
    let flowVault: &FlowToken.Vault

    prepare(signer: AuthAccount) {
        self.ponderManager = signer.borrow<&FlowPonder.PonderManager>(
            from: FlowPonder.PonderStoragePath
        ) ?? panic("Could not borrow PonderManager")
        self.flowVault = signer.borrow<&FlowToken.Vault>(
            from: /storage/flowTokenVault
        ) ?? panic("Could not borrow FlowToken vault")
    }

    execute {
        let payment <- self.flowVault.withdraw(amount: amount)
        self.ponderManager.placeVote(ponderId: ponderId, option: option, payment: <-payment)
    }
}
""",
)

PLACE_FREE_VOTE = ScriptTemplate(
    name="place_free_vote",
    is_transaction=True,
    cadence="""
import FlowPonder from 0xFlowPonder

transaction(ponderId: UInt64, option: UInt8) {
    let ponderManager: &FlowPonder.PonderManager

    prepare(signer: AuthAccount) {
        self.ponderManager = signer.borrow<&FlowPonder.PonderManager>(
            from: FlowPonder.PonderStoragePath
        ) ?? panic("Could not borrow PonderManager")
    }

    execute {
        self.ponderManager.placeVote(ponderId: ponderId, option: option, payment: nil)
    }
}
""",
)

WITHDRAW_WINNINGS = ScriptTemplate(
    name="withdraw_winnings",
    is_transaction=True,
    cadence="""
import FlowPonder from 0xFlowPonder
import FlowToken from 0xFlowToken

transaction(ponderId: UInt64) {
    let ponderManager: &FlowPonder.PonderManager
    let flowVault: &FlowToken.Vault

    prepare(signer: AuthAccount) {
        self.ponderManager = signer.borrow<&FlowPonder.PonderManager>(
            from: FlowPonder.PonderStoragePath
        ) ?? panic("Could not borrow PonderManager")
        self.flowVault = signer.borrow<&FlowToken.Vault>(
            from: /storage/flowTokenVault
        ) ?? panic("Could not borrow FlowToken vault")
    }

    execute {
        let winnings <- self.ponderManager.withdrawWinnings(ponderId: ponderId)
        self.flowVault.deposit(from: <-winnings)
    }
}
""",
)

# ---------------------------------------------------------------------------
# Read-only scripts
# ---------------------------------------------------------------------------

GET_ACTIVE_PONDERS = ScriptTemplate(
    name="get_active_ponders",
    cadence=f"""
import FlowPonder from 0xFlowPonder

pub fun main(): [FlowPonder.Ponder] {{{_BORROW_PUBLIC}
        return ponderRef.getAllActivePonders()
}}
""",
)

GET_PONDER = ScriptTemplate(
    name="get_ponder",
    cadence=f"""
import FlowPonder from 0xFlowPonder

pub fun main(ponderId: UInt64): FlowPonder.Ponder? {{{_BORROW_PUBLIC}
        return ponderRef.getPonder(id: ponderId)
}}
""",
)

GET_USER_STATS = ScriptTemplate(
    name="get_user_stats",
    cadence=f"""
import FlowPonder from 0xFlowPonder

pub fun main(userAddress: Address): FlowPonder.UserStats? {{{_BORROW_PUBLIC}
        return ponderRef.getUserStats(user: userAddress)
}}
""",
)

GET_USER_VOTES = ScriptTemplate(
    name="get_user_votes",
    cadence=f"""
import FlowPonder from 0xFlowPonder

pub fun main(userAddress: Address): [FlowPonder.Vote] {{{_BORROW_PUBLIC}
        return ponderRef.getUserVotes(user: userAddress)
}}
""",
)

GET_LEADERBOARD = ScriptTemplate(
    name="get_leaderboard",
    cadence=f"""
import FlowPonder from 0xFlowPonder

pub fun main(): [Address] {{{_BORROW_PUBLIC}
        return ponderRef.getLeaderboard()
}}
""",
)

GET_FLOW_BALANCE = ScriptTemplate(
    name="get_flow_balance",
    cadence="""
import FungibleToken from 0xFungibleToken
import FlowToken from 0xFlowToken

pub fun main(address: Address): UFix64 {
    let vaultRef = getAccount(address)
        .getCapability(/public/flowTokenBalance)
        .borrow<&FlowToken.Vault{FungibleToken.Balance}>()
        ?? panic("Could not borrow Balance reference to the Vault")
    return vaultRef.balance
}
""",
)

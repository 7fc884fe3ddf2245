from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ItemConfig:
    key: str
    label: str
    description: str
    connection: str


@dataclass(frozen=True)
class GroupConfig:
    key: str
    name: str
    description: str
    items: Tuple[ItemConfig, ...]

    @property
    def item_keys(self) -> List[str]:
        return [item.key for item in self.items]


@dataclass(frozen=True)
class ToolConfig:
    id: str
    name: str
    purpose: str
    groups: Tuple[GroupConfig, ...]

    @property
    def items(self) -> List[ItemConfig]:
        return [item for group in self.groups for item in group.items]

    def item(self, key: str) -> Optional[ItemConfig]:
        return next((i for i in self.items if i.key == key), None)

    def group(self, key: str) -> Optional[GroupConfig]:
        return next((g for g in self.groups if g.key == key), None)

    def label_for(self, key: str) -> str:
        item = self.item(key)
        if item:
            return item.label
        group = self.group(key)
        return group.name if group else key


def _item(key, label, description, connection) -> ItemConfig:
    return ItemConfig(key, label, description, connection)


TOOLS: Dict[str, ToolConfig] = {
    "tool3": ToolConfig(
        id="tool3",
        name="Identity & Validation Grounding Tool",
        purpose="Reveals patterns of disconnection from your authentic self through false self-view and external validation",
        groups=(
            GroupConfig(
                key="domain1",
                name="False Self-View",
                description="Confusion and lack of clarity about your financial reality",
                items=(
                    _item("subdomain_1_1", "I'm Not Worthy of Financial Freedom",
                          "Patterns of unworthiness that lead to financial avoidance and self-sabotage",
                          "Believing you're not worthy of financial freedom leads to avoiding financial reality and scattering resources"),
                    _item("subdomain_1_2", "I'll Never Have Enough",
                          "Patterns of scarcity thinking that create selective financial blindness",
                          "Believing there will never be enough leads to watching only income or only spending, never the full picture"),
                    _item("subdomain_1_3", "I Can't See My Financial Reality",
                          "Patterns of overwhelm that lead to willful ignorance about finances",
                          "Believing finances are too complex leads to fragmenting your view and avoiding the full picture"),
                ),
            ),
            GroupConfig(
                key="domain2",
                name="External Validation",
                description="Financial decisions driven by others' opinions rather than your needs",
                items=(
                    _item("subdomain_2_1", "Money Shows My Worth",
                          "Patterns of equating self-worth with money that drive image spending",
                          "Believing your worth is determined by money leads to spending to project success regardless of the strain"),
                    _item("subdomain_2_2", "What Will They Think?",
                          "Patterns of seeking approval that lead to financial hiding and people-pleasing",
                          "Living for others' approval leads to hiding your financial choices out of fear of judgment"),
                    _item("subdomain_2_3", "I Need to Prove Myself",
                          "Patterns of needing external proof that drive status spending",
                          "Needing to prove your worth through money leads to buying status symbols"),
                ),
            ),
        ),
    ),
    "tool5": ToolConfig(
        id="tool5",
        name="Love & Connection Grounding Tool",
        purpose="Reveals patterns of disconnection from others through issues showing and receiving love",
        groups=(
            GroupConfig(
                key="domain1",
                name="Issues Showing Love",
                description="Patterns of compulsive giving and self-sacrifice in relationships",
                items=(
                    _item("subdomain_1_1", "I Must Give to Be Loved",
                          "Patterns of believing love requires financial sacrifice",
                          "Believing you must give financially to be loved leads to compulsive giving even when you can't afford it"),
                    _item("subdomain_1_2", "Their Needs > My Needs",
                          "Patterns of believing others' needs are more important",
                          "Believing others' needs are more important leads to self-abandonment"),
                    _item("subdomain_1_3", "I Can't Accept Help",
                          "Patterns of believing you must be the giver",
                          "Believing you must be the giver leads to refusing to receive"),
                ),
            ),
            GroupConfig(
                key="domain2",
                name="Issues Receiving Love",
                description="Patterns of unhealthy dependence and difficulty accepting help",
                items=(
                    _item("subdomain_2_1", "I Can't Make It Alone",
                          "Patterns of believing you can't survive independently",
                          "Believing you can't survive independently leads to financial dependency"),
                    _item("subdomain_2_2", "I Owe Them Everything",
                          "Patterns of believing help creates debt",
                          "Believing help creates debt leads to feeling trapped by obligation"),
                    _item("subdomain_2_3", "If They Stop Giving, I'm Abandoned",
                          "Patterns of believing you'll be abandoned without help",
                          "Believing you'll be abandoned without help leads to emotional manipulation"),
                ),
            ),
        ),
    ),
    "tool7": ToolConfig(
        id="tool7",
        name="Security & Control Grounding Tool",
        purpose="Reveals patterns of disconnection from trust in life through control and fear-based isolation",
        groups=(
            GroupConfig(
                key="domain1",
                name="Control Leading to Isolation",
                description="Self-imposed suffering through rejection of help and systems",
                items=(
                    _item("subdomain_1_1", "I Must Control Everything",
                          "Patterns of needing total control that lead to exhaustion and isolation",
                          "Believing you must control everything leads to rejection of help and systems"),
                    _item("subdomain_1_2", "I Can't Trust Others",
                          "Patterns of distrust that lead to isolated self-reliance",
                          "Believing others will fail you leads to isolated self-reliance"),
                    _item("subdomain_1_3", "Asking for Help Is Weakness",
                          "Patterns of viewing help as failure that lead to martyr suffering",
                          "Believing help is weakness leads to martyr suffering"),
                ),
            ),
            GroupConfig(
                key="domain2",
                name="Fear Leading to Isolation",
                description="Creating disasters through catastrophic thinking and self-sabotage",
                items=(
                    _item("subdomain_2_1", "Everything Will Go Wrong",
                          "Patterns of catastrophic thinking that lead to self-sabotage",
                          "Believing disaster is inevitable leads to catastrophic thinking and protective sabotage"),
                    _item("subdomain_2_2", "Better the Devil I Know",
                          "Patterns of fearing change more than current dysfunction",
                          "Believing change is dangerous leads to staying in dysfunction"),
                    _item("subdomain_2_3", "I Always Trust the Wrong People",
                          "Patterns of expecting betrayal that lead to choosing untrustworthy people",
                          "Believing you'll be betrayed leads to choosing untrustworthy people"),
                ),
            ),
        ),
    ),
}


def get_tool(tool_id: str) -> Optional[ToolConfig]:
    return TOOLS.get(tool_id)

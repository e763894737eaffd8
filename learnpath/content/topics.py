"""Map free-text interests onto a fixed taxonomy of technology topics."""

from typing import Dict, List, Tuple

TOPIC_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "openshift": ("openshift", "kubernetes", "k8s", "containers", "orchestration", "pods", "deployment"),
    "ansible": ("ansible", "automation", "playbook", "configuration management", "infrastructure as code"),
    "rhel": ("rhel", "red hat enterprise linux", "linux", "system administration", "centos", "fedora"),
    "ai": ("ai", "artificial intelligence", "machine learning", "ml", "data science", "neural networks"),
    "cloud": ("cloud", "aws", "azure", "gcp", "hybrid cloud", "multi-cloud", "cloud native"),
    "security": ("security", "selinux", "compliance", "vulnerability", "cybersecurity", "encryption"),
    "networking": ("networking", "network", "tcp", "ip", "dns", "firewall", "load balancer"),
    "storage": ("storage", "ceph", "gluster", "persistent volume", "block storage", "object storage"),
    "monitoring": ("monitoring", "prometheus", "grafana", "observability", "metrics", "alerting"),
    "devops": ("devops", "ci/cd", "pipeline", "deployment", "continuous integration", "gitops"),
    "virtualization": ("virtualization", "vm", "virtual machine", "hypervisor", "kvm", "qemu"),
    "middleware": ("middleware", "jboss", "wildfly", "apache", "tomcat", "application server"),
}

STOPWORDS = frozenset(
    {
        "want", "learn", "need", "help", "with", "about", "from",
        "that", "this", "they", "have", "will", "been",
    }
)

FALLBACK_TOPIC_COUNT = 3
MIN_FALLBACK_TOKEN_LENGTH = 4


def extract_topics(text: str) -> List[str]:
    """
    Extract topic names from user input.

    Keywords match as plain substrings, so short ones such as ``ai`` or ``ip``
    also fire inside longer words. When no bucket matches, the first few
    meaningful words of the input are returned instead.
    """
    lowered = (text or "").lower()

    topics = [
        topic
        for topic, keywords in TOPIC_KEYWORDS.items()
        if any(keyword in lowered for keyword in keywords)
    ]

    if not topics:
        words = [
            word
            for word in lowered.split()
            if len(word) >= MIN_FALLBACK_TOKEN_LENGTH and word not in STOPWORDS
        ]
        topics = words[:FALLBACK_TOPIC_COUNT]

    return list(dict.fromkeys(topics))

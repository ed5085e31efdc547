"""
Success-case builders. Every function returns a fresh object that passes
create validation; tests mutate a single field to build an error case.
"""

from kubeadmit.core.models import (
    CPU_REQUEST,
    CPUTargetUtilization,
    ClusterAutoscaler,
    ClusterAutoscalerSpec,
    ConfigMap,
    Container,
    DNS_CLUSTER_FIRST,
    DaemonSet,
    DaemonSetSpec,
    DaemonSetUpdateStrategy,
    Deployment,
    DeploymentSpec,
    HTTPIngressPath,
    HTTPIngressRuleValue,
    HorizontalPodAutoscaler,
    HorizontalPodAutoscalerSpec,
    Ingress,
    IngressBackend,
    IngressRule,
    IngressSpec,
    IngressStatus,
    IntOrString,
    Job,
    JobSpec,
    LabelSelector,
    LoadBalancerIngress,
    LoadBalancerStatus,
    NAMESPACE_DEFAULT,
    NodeUtilization,
    ObjectMeta,
    PULL_IF_NOT_PRESENT,
    PULL_NEVER,
    PodSpec,
    PodTemplateSpec,
    RESTART_POLICY_ALWAYS,
    RESTART_POLICY_ON_FAILURE,
    ROLLING_UPDATE_DAEMON_SET_STRATEGY,
    RollingUpdateDaemonSet,
    Scale,
    ScaleSpec,
    SubresourceReference,
)


def meta(name="abc", namespace=NAMESPACE_DEFAULT, **kwargs):
    return ObjectMeta(name=name, namespace=namespace, **kwargs)


def pod_spec(restart_policy=RESTART_POLICY_ALWAYS, container_name="abc", pull=PULL_IF_NOT_PRESENT):
    return PodSpec(
        restart_policy=restart_policy,
        dns_policy=DNS_CLUSTER_FIRST,
        containers=[Container(name=container_name, image="image", image_pull_policy=pull)],
    )


def pod_template(labels=None, restart_policy=RESTART_POLICY_ALWAYS):
    return PodTemplateSpec(
        metadata=ObjectMeta(labels=dict(labels if labels is not None else {"a": "b"})),
        spec=pod_spec(restart_policy),
    )


def rolling_daemon_strategy(max_unavailable=1):
    return DaemonSetUpdateStrategy(
        type=ROLLING_UPDATE_DAEMON_SET_STRATEGY,
        rolling_update=RollingUpdateDaemonSet(max_unavailable=IntOrString.parse(max_unavailable)),
    )


def valid_daemon_set(name="abc"):
    return DaemonSet(
        metadata=meta(name),
        spec=DaemonSetSpec(
            selector=LabelSelector(match_labels={"a": "b"}),
            template=pod_template({"a": "b"}),
            update_strategy=rolling_daemon_strategy(),
        ),
    )


def valid_deployment():
    template = PodTemplateSpec(
        metadata=ObjectMeta(name="abc", namespace=NAMESPACE_DEFAULT, labels={"name": "abc"}),
        spec=PodSpec(
            restart_policy=RESTART_POLICY_ALWAYS,
            dns_policy="Default",
            containers=[Container(name="nginx", image="image", image_pull_policy=PULL_NEVER)],
        ),
    )
    return Deployment(
        metadata=meta("abc"),
        spec=DeploymentSpec(selector={"name": "abc"}, template=template, unique_label_key="my-label"),
    )


def valid_job():
    return Job(
        metadata=meta("myjob"),
        spec=JobSpec(
            selector=LabelSelector(match_labels={"a": "b"}),
            template=pod_template({"a": "b"}, RESTART_POLICY_ON_FAILURE),
        ),
    )


def valid_hpa():
    return HorizontalPodAutoscaler(
        metadata=meta("myautoscaler"),
        spec=HorizontalPodAutoscalerSpec(
            scale_ref=SubresourceReference(kind="ReplicationController", name="myrc", subresource="scale"),
            min_replicas=1,
            max_replicas=5,
            cpu_utilization=CPUTargetUtilization(target_percentage=70),
        ),
    )


def default_backend():
    return IngressBackend(service_name="default-backend", service_port=IntOrString.from_int(80))


def valid_ingress():
    return Ingress(
        metadata=meta("foo"),
        spec=IngressSpec(
            backend=default_backend(),
            rules=[IngressRule(
                host="foo.bar.com",
                http=HTTPIngressRuleValue(paths=[HTTPIngressPath(path="/foo", backend=default_backend())]),
            )],
        ),
        status=IngressStatus(LoadBalancerStatus(ingress=[LoadBalancerIngress(ip="127.0.0.1")])),
    )


def valid_cluster_autoscaler():
    return ClusterAutoscaler(
        metadata=meta("ClusterAutoscaler"),
        spec=ClusterAutoscalerSpec(
            min_nodes=1,
            max_nodes=5,
            target_utilization=[NodeUtilization(resource=CPU_REQUEST, value=0.7)],
        ),
    )


def valid_scale(replicas=1):
    return Scale(metadata=meta("frontend"), spec=ScaleSpec(replicas=replicas))


def config_map(name="validname", namespace="validns", data=None, resource_version=""):
    return ConfigMap(
        metadata=ObjectMeta(name=name, namespace=namespace, resource_version=resource_version),
        data=dict(data or {}),
    )

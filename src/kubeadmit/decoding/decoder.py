#!/usr/bin/env python3
"""
KUBEADMIT DECODER - Typed Object Builder
----------------------------------------
Turns a loaded manifest mapping (camelCase keys) into the typed models the
validators work on. Only field TYPES are checked here; field VALUES are the
validators' business.

With ``apply_defaults`` (the default) the decoder fills in what the API
server would before admission: namespace, restart and DNS policies, pull
policy, port protocol, update strategies and selectors derived from
template labels.

Both the original extensions/v1beta1 spellings and the later ones are
accepted where they differ (``scaleRef`` vs ``scaleTargetRef``, the two
ingress backend shapes, ``matchLabels`` around a Deployment selector).

Author: KubeAdmit Team
Date: 2026-10-17
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from kubeadmit.core.models import (
    CPUTargetUtilization,
    ClusterAutoscaler,
    ClusterAutoscalerSpec,
    ConfigMap,
    ConfigMapVolumeSource,
    Container,
    ContainerPort,
    DNS_CLUSTER_FIRST,
    DaemonSet,
    DaemonSetSpec,
    DaemonSetStatus,
    DaemonSetUpdateStrategy,
    Deployment,
    DeploymentRollback,
    DeploymentSpec,
    DeploymentStatus,
    DeploymentStrategy,
    EmptyDirVolumeSource,
    EnvVar,
    GCEPersistentDiskVolumeSource,
    HTTPIngressPath,
    HTTPIngressRuleValue,
    HorizontalPodAutoscaler,
    HorizontalPodAutoscalerSpec,
    HorizontalPodAutoscalerStatus,
    HostPathVolumeSource,
    Ingress,
    IngressBackend,
    IngressRule,
    IngressSpec,
    IngressStatus,
    IngressTLS,
    IntOrString,
    Job,
    JobSpec,
    JobStatus,
    LabelSelector,
    LabelSelectorRequirement,
    LoadBalancerIngress,
    LoadBalancerStatus,
    NAMESPACE_DEFAULT,
    NodeUtilization,
    ObjectMeta,
    PROTOCOL_TCP,
    PULL_ALWAYS,
    PULL_IF_NOT_PRESENT,
    PodSpec,
    PodTemplateSpec,
    RESTART_POLICY_ALWAYS,
    ROLLING_UPDATE_DAEMON_SET_STRATEGY,
    ROLLING_UPDATE_DEPLOYMENT_STRATEGY,
    RollbackConfig,
    RollingUpdateDaemonSet,
    RollingUpdateDeployment,
    Scale,
    ScaleSpec,
    ScaleStatus,
    SecretVolumeSource,
    SubresourceReference,
    Volume,
    VolumeMount,
)
from kubeadmit.decoding.loader import ManifestError
from kubeadmit.validation.field import Path

logger = logging.getLogger("kubeadmit.decoder")

_VOLUME_SOURCE_KEYS = ("emptyDir", "hostPath", "gcePersistentDisk", "secret", "configMap")


class UnknownKindError(ManifestError):
    """The document's ``kind`` has no typed model."""

    def __init__(self, kind: str, source: str = "<string>", index: Optional[int] = None):
        self.kind = kind
        super().__init__(f"unsupported kind '{kind}'", source, index)


class _FieldTypeError(Exception):
    def __init__(self, at: Path, message: str):
        super().__init__(f"{at}: {message}")


class KubeDecoder:
    """Builds typed resource objects from manifest mappings."""

    def __init__(self, apply_defaults: bool = True):
        self.apply_defaults = apply_defaults
        self._builders: Dict[str, Callable[[Mapping], Any]] = {
            HorizontalPodAutoscaler.KIND: self._hpa,
            DaemonSet.KIND: self._daemon_set,
            Deployment.KIND: self._deployment,
            DeploymentRollback.KIND: self._deployment_rollback,
            Job.KIND: self._job,
            Ingress.KIND: self._ingress,
            ClusterAutoscaler.KIND: self._cluster_autoscaler,
            Scale.KIND: self._scale,
            ConfigMap.KIND: self._config_map,
        }

    def supports(self, kind: str) -> bool:
        return kind in self._builders

    def decode(self, doc: Mapping, source: str = "<string>", index: Optional[int] = None) -> Any:
        """
        Decodes one manifest document.

        Raises:
            UnknownKindError: ``kind`` has no model.
            ManifestError: ``kind`` is missing or a field has the wrong type.
        """
        if not isinstance(doc, Mapping):
            raise ManifestError("document is not a mapping", source, index)
        kind = doc.get("kind")
        if not isinstance(kind, str) or not kind:
            raise ManifestError("missing required top-level field 'kind'", source, index)
        if kind not in self._builders:
            raise UnknownKindError(kind, source, index)

        try:
            obj = self._builders[kind](doc)
        except _FieldTypeError as e:
            raise ManifestError(str(e), source, index) from e
        logger.debug(f"Decoded {kind} from {source}")
        return obj

    # --- scalar readers ---

    def _map(self, raw: Any, at: Path) -> Mapping:
        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise _FieldTypeError(at, f"expected a mapping, got {type(raw).__name__}")
        return raw

    def _list(self, raw: Any, at: Path) -> List[Any]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise _FieldTypeError(at, f"expected a list, got {type(raw).__name__}")
        return raw

    def _str(self, raw: Any, at: Path, default: str = "") -> str:
        if raw is None:
            return default
        if not isinstance(raw, str):
            raise _FieldTypeError(at, f"expected a string, got {type(raw).__name__}")
        return str(raw)

    def _int(self, raw: Any, at: Path, default: int = 0) -> int:
        if raw is None:
            return default
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise _FieldTypeError(at, f"expected an integer, got {type(raw).__name__}")
        return int(raw)

    def _opt_int(self, raw: Any, at: Path) -> Optional[int]:
        return None if raw is None else self._int(raw, at)

    def _float(self, raw: Any, at: Path) -> float:
        if raw is None:
            return 0.0
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise _FieldTypeError(at, f"expected a number, got {type(raw).__name__}")
        return float(raw)

    def _bool(self, raw: Any, at: Path) -> bool:
        if raw is None:
            return False
        if not isinstance(raw, bool):
            raise _FieldTypeError(at, f"expected a boolean, got {type(raw).__name__}")
        return raw

    def _int_or_string(self, raw: Any, at: Path) -> IntOrString:
        if isinstance(raw, float):
            raise _FieldTypeError(at, "expected an integer or string, got float")
        try:
            return IntOrString.parse(raw)
        except TypeError as e:
            raise _FieldTypeError(at, str(e)) from e

    def _string_map(self, raw: Any, at: Path) -> Dict[str, str]:
        out = {}
        for k, v in self._map(raw, at).items():
            out[str(k)] = self._str(v, at.key(str(k)))
        return out

    # --- shared structures ---

    def _object_meta(self, raw: Any, at: Path, namespaced: bool = True) -> ObjectMeta:
        m = self._map(raw, at)
        created = m.get("creationTimestamp")
        meta = ObjectMeta(
            name=self._str(m.get("name"), at.child("name")),
            generate_name=self._str(m.get("generateName"), at.child("generateName")),
            namespace=self._str(m.get("namespace"), at.child("namespace")),
            labels=self._string_map(m.get("labels"), at.child("labels")),
            annotations=self._string_map(m.get("annotations"), at.child("annotations")),
            resource_version=self._str(m.get("resourceVersion"), at.child("resourceVersion")),
            uid=self._str(m.get("uid"), at.child("uid")),
            generation=self._int(m.get("generation"), at.child("generation")),
            # ruamel hands timestamps back as datetime objects
            creation_timestamp=None if created is None else str(created),
            deletion_grace_period_seconds=self._opt_int(m.get("deletionGracePeriodSeconds"),
                                                        at.child("deletionGracePeriodSeconds")),
        )
        if self.apply_defaults and namespaced and not meta.namespace:
            meta.namespace = NAMESPACE_DEFAULT
        return meta

    def _label_selector(self, raw: Any, at: Path) -> Optional[LabelSelector]:
        if raw is None:
            return None
        m = self._map(raw, at)
        if "matchLabels" not in m and "matchExpressions" not in m:
            # bare label map, as older manifests write it
            return LabelSelector(match_labels=self._string_map(m, at))

        exprs = []
        for i, e in enumerate(self._list(m.get("matchExpressions"), at.child("matchExpressions"))):
            e_at = at.child("matchExpressions").index(i)
            e = self._map(e, e_at)
            exprs.append(LabelSelectorRequirement(
                key=self._str(e.get("key"), e_at.child("key")),
                operator=self._str(e.get("operator"), e_at.child("operator")),
                values=[self._str(v, e_at.child("values").index(j))
                        for j, v in enumerate(self._list(e.get("values"), e_at.child("values")))],
            ))
        return LabelSelector(
            match_labels=self._string_map(m.get("matchLabels"), at.child("matchLabels")),
            match_expressions=exprs,
        )

    def _pod_template(self, raw: Any, at: Path) -> PodTemplateSpec:
        m = self._map(raw, at)
        return PodTemplateSpec(
            metadata=self._object_meta(m.get("metadata"), at.child("metadata"), namespaced=False),
            spec=self._pod_spec(m.get("spec"), at.child("spec")),
        )

    def _pod_spec(self, raw: Any, at: Path) -> PodSpec:
        m = self._map(raw, at)
        spec = PodSpec(
            volumes=[self._volume(v, at.child("volumes").index(i))
                     for i, v in enumerate(self._list(m.get("volumes"), at.child("volumes")))],
            containers=[self._container(c, at.child("containers").index(i))
                        for i, c in enumerate(self._list(m.get("containers"), at.child("containers")))],
            restart_policy=self._str(m.get("restartPolicy"), at.child("restartPolicy")),
            dns_policy=self._str(m.get("dnsPolicy"), at.child("dnsPolicy")),
            node_selector=self._string_map(m.get("nodeSelector"), at.child("nodeSelector")),
            node_name=self._str(m.get("nodeName"), at.child("nodeName")),
            active_deadline_seconds=self._opt_int(m.get("activeDeadlineSeconds"),
                                                  at.child("activeDeadlineSeconds")),
        )
        if self.apply_defaults:
            spec.restart_policy = spec.restart_policy or RESTART_POLICY_ALWAYS
            spec.dns_policy = spec.dns_policy or DNS_CLUSTER_FIRST
        return spec

    def _container(self, raw: Any, at: Path) -> Container:
        m = self._map(raw, at)
        ctr = Container(
            name=self._str(m.get("name"), at.child("name")),
            image=self._str(m.get("image"), at.child("image")),
            image_pull_policy=self._str(m.get("imagePullPolicy"), at.child("imagePullPolicy")),
        )
        for i, p in enumerate(self._list(m.get("ports"), at.child("ports"))):
            p_at = at.child("ports").index(i)
            p = self._map(p, p_at)
            default_protocol = PROTOCOL_TCP if self.apply_defaults else ""
            ctr.ports.append(ContainerPort(
                container_port=self._int(p.get("containerPort"), p_at.child("containerPort")),
                name=self._str(p.get("name"), p_at.child("name")),
                protocol=self._str(p.get("protocol"), p_at.child("protocol"), default_protocol),
                host_port=self._int(p.get("hostPort"), p_at.child("hostPort")),
            ))
        for i, e in enumerate(self._list(m.get("env"), at.child("env"))):
            e_at = at.child("env").index(i)
            e = self._map(e, e_at)
            ctr.env.append(EnvVar(name=self._str(e.get("name"), e_at.child("name")),
                                  value=self._str(e.get("value"), e_at.child("value"))))
        for i, v in enumerate(self._list(m.get("volumeMounts"), at.child("volumeMounts"))):
            v_at = at.child("volumeMounts").index(i)
            v = self._map(v, v_at)
            ctr.volume_mounts.append(VolumeMount(
                name=self._str(v.get("name"), v_at.child("name")),
                mount_path=self._str(v.get("mountPath"), v_at.child("mountPath")),
                read_only=self._bool(v.get("readOnly"), v_at.child("readOnly")),
            ))
        if self.apply_defaults and not ctr.image_pull_policy and ctr.image:
            ctr.image_pull_policy = _default_pull_policy(ctr.image)
        return ctr

    def _volume(self, raw: Any, at: Path) -> Volume:
        m = self._map(raw, at)
        unknown = [k for k in m if k != "name" and k not in _VOLUME_SOURCE_KEYS]
        if unknown:
            raise _FieldTypeError(at, f"unsupported volume source(s): {', '.join(sorted(unknown))}")

        vol = Volume(name=self._str(m.get("name"), at.child("name")))
        if "emptyDir" in m:
            ed = self._map(m["emptyDir"], at.child("emptyDir"))
            vol.empty_dir = EmptyDirVolumeSource(medium=self._str(ed.get("medium"), at.child("emptyDir", "medium")))
        if "hostPath" in m:
            hp = self._map(m["hostPath"], at.child("hostPath"))
            vol.host_path = HostPathVolumeSource(path=self._str(hp.get("path"), at.child("hostPath", "path")))
        if "gcePersistentDisk" in m:
            pd_at = at.child("gcePersistentDisk")
            pd = self._map(m["gcePersistentDisk"], pd_at)
            vol.gce_persistent_disk = GCEPersistentDiskVolumeSource(
                pd_name=self._str(pd.get("pdName"), pd_at.child("pdName")),
                fs_type=self._str(pd.get("fsType"), pd_at.child("fsType")),
                partition=self._int(pd.get("partition"), pd_at.child("partition")),
                read_only=self._bool(pd.get("readOnly"), pd_at.child("readOnly")),
            )
        if "secret" in m:
            s = self._map(m["secret"], at.child("secret"))
            vol.secret = SecretVolumeSource(secret_name=self._str(s.get("secretName"),
                                                                  at.child("secret", "secretName")))
        if "configMap" in m:
            c = self._map(m["configMap"], at.child("configMap"))
            vol.config_map = ConfigMapVolumeSource(name=self._str(c.get("name"), at.child("configMap", "name")))
        return vol

    # --- kinds ---

    def _hpa(self, doc: Mapping) -> HorizontalPodAutoscaler:
        spec_at = Path.root("spec")
        s = self._map(doc.get("spec"), spec_at)

        if "scaleTargetRef" in s:
            ref_at = spec_at.child("scaleTargetRef")
            r = self._map(s["scaleTargetRef"], ref_at)
            subresource = "scale"
        else:
            ref_at = spec_at.child("scaleRef")
            r = self._map(s.get("scaleRef"), ref_at)
            subresource = self._str(r.get("subresource"), ref_at.child("subresource"))
        ref = SubresourceReference(
            kind=self._str(r.get("kind"), ref_at.child("kind")),
            name=self._str(r.get("name"), ref_at.child("name")),
            api_version=self._str(r.get("apiVersion"), ref_at.child("apiVersion")),
            subresource=subresource,
        )

        cpu = None
        if "targetCPUUtilizationPercentage" in s:
            cpu = CPUTargetUtilization(self._int(s["targetCPUUtilizationPercentage"],
                                                 spec_at.child("targetCPUUtilizationPercentage")))
        elif s.get("cpuUtilization") is not None:
            c_at = spec_at.child("cpuUtilization")
            c = self._map(s["cpuUtilization"], c_at)
            cpu = CPUTargetUtilization(self._int(c.get("targetPercentage"), c_at.child("targetPercentage")))

        min_replicas = self._opt_int(s.get("minReplicas"), spec_at.child("minReplicas"))
        if self.apply_defaults and min_replicas is None:
            min_replicas = 1

        st_at = Path.root("status")
        st = self._map(doc.get("status"), st_at)
        return HorizontalPodAutoscaler(
            metadata=self._object_meta(doc.get("metadata"), Path.root("metadata")),
            spec=HorizontalPodAutoscalerSpec(
                scale_ref=ref,
                min_replicas=min_replicas,
                max_replicas=self._int(s.get("maxReplicas"), spec_at.child("maxReplicas")),
                cpu_utilization=cpu,
            ),
            status=HorizontalPodAutoscalerStatus(
                observed_generation=self._opt_int(st.get("observedGeneration"), st_at.child("observedGeneration")),
                current_replicas=self._int(st.get("currentReplicas"), st_at.child("currentReplicas")),
                desired_replicas=self._int(st.get("desiredReplicas"), st_at.child("desiredReplicas")),
                current_cpu_utilization_percentage=self._opt_int(
                    st.get("currentCPUUtilizationPercentage"), st_at.child("currentCPUUtilizationPercentage")),
            ),
        )

    def _daemon_set(self, doc: Mapping) -> DaemonSet:
        spec_at = Path.root("spec")
        s = self._map(doc.get("spec"), spec_at)
        template = None
        if s.get("template") is not None:
            template = self._pod_template(s["template"], spec_at.child("template"))
        selector = self._label_selector(s.get("selector"), spec_at.child("selector"))

        us_at = spec_at.child("updateStrategy")
        us = self._map(s.get("updateStrategy"), us_at)
        strategy = DaemonSetUpdateStrategy(type=self._str(us.get("type"), us_at.child("type")))
        if us.get("rollingUpdate") is not None:
            ru_at = us_at.child("rollingUpdate")
            ru = self._map(us["rollingUpdate"], ru_at)
            strategy.rolling_update = RollingUpdateDaemonSet(
                max_unavailable=self._int_or_string(ru.get("maxUnavailable"), ru_at.child("maxUnavailable")),
                min_ready_seconds=self._int(ru.get("minReadySeconds", s.get("minReadySeconds")),
                                            ru_at.child("minReadySeconds")),
            )

        if self.apply_defaults:
            if selector is None and template is not None and template.metadata.labels:
                selector = LabelSelector(match_labels=dict(template.metadata.labels))
            if not strategy.type:
                strategy.type = ROLLING_UPDATE_DAEMON_SET_STRATEGY
            if strategy.type == ROLLING_UPDATE_DAEMON_SET_STRATEGY and strategy.rolling_update is None:
                strategy.rolling_update = RollingUpdateDaemonSet(max_unavailable=IntOrString.from_int(1))

        st_at = Path.root("status")
        st = self._map(doc.get("status"), st_at)
        return DaemonSet(
            metadata=self._object_meta(doc.get("metadata"), Path.root("metadata")),
            spec=DaemonSetSpec(selector=selector, template=template, update_strategy=strategy),
            status=DaemonSetStatus(
                current_number_scheduled=self._int(st.get("currentNumberScheduled"),
                                                   st_at.child("currentNumberScheduled")),
                number_misscheduled=self._int(st.get("numberMisscheduled"), st_at.child("numberMisscheduled")),
                desired_number_scheduled=self._int(st.get("desiredNumberScheduled"),
                                                   st_at.child("desiredNumberScheduled")),
            ),
        )

    def _deployment(self, doc: Mapping) -> Deployment:
        spec_at = Path.root("spec")
        s = self._map(doc.get("spec"), spec_at)
        template = self._pod_template(s.get("template"), spec_at.child("template"))

        sel_at = spec_at.child("selector")
        sel_raw = self._map(s.get("selector"), sel_at)
        if "matchExpressions" in sel_raw:
            raise _FieldTypeError(sel_at.child("matchExpressions"), "not supported on a Deployment selector")
        if "matchLabels" in sel_raw:
            selector = self._string_map(sel_raw["matchLabels"], sel_at.child("matchLabels"))
        else:
            selector = self._string_map(sel_raw, sel_at)

        st_at = spec_at.child("strategy")
        st = self._map(s.get("strategy"), st_at)
        strategy = DeploymentStrategy(type=self._str(st.get("type"), st_at.child("type")))
        if st.get("rollingUpdate") is not None:
            ru_at = st_at.child("rollingUpdate")
            ru = self._map(st["rollingUpdate"], ru_at)
            strategy.rolling_update = RollingUpdateDeployment(
                max_unavailable=self._int_or_string(ru.get("maxUnavailable"), ru_at.child("maxUnavailable")),
                max_surge=self._int_or_string(ru.get("maxSurge"), ru_at.child("maxSurge")),
                min_ready_seconds=self._int(ru.get("minReadySeconds", s.get("minReadySeconds")),
                                            ru_at.child("minReadySeconds")),
            )

        replicas = s.get("replicas")
        if self.apply_defaults:
            if not selector:
                selector = dict(template.metadata.labels)
            if replicas is None:
                replicas = 1
            if not strategy.type:
                strategy.type = ROLLING_UPDATE_DEPLOYMENT_STRATEGY
            if strategy.type == ROLLING_UPDATE_DEPLOYMENT_STRATEGY and strategy.rolling_update is None:
                strategy.rolling_update = RollingUpdateDeployment(
                    max_unavailable=IntOrString.from_int(1),
                    max_surge=IntOrString.from_int(1),
                    min_ready_seconds=self._int(s.get("minReadySeconds"), spec_at.child("minReadySeconds")),
                )

        status_at = Path.root("status")
        status = self._map(doc.get("status"), status_at)
        return Deployment(
            metadata=self._object_meta(doc.get("metadata"), Path.root("metadata")),
            spec=DeploymentSpec(
                replicas=self._int(replicas, spec_at.child("replicas")),
                selector=selector,
                template=template,
                strategy=strategy,
                unique_label_key=self._str(s.get("uniqueLabelKey"), spec_at.child("uniqueLabelKey")),
            ),
            status=DeploymentStatus(
                replicas=self._int(status.get("replicas"), status_at.child("replicas")),
                updated_replicas=self._int(status.get("updatedReplicas"), status_at.child("updatedReplicas")),
            ),
        )

    def _deployment_rollback(self, doc: Mapping) -> DeploymentRollback:
        rb_at = Path.root("rollbackTo")
        rb = self._map(doc.get("rollbackTo"), rb_at)
        return DeploymentRollback(
            name=self._str(doc.get("name"), Path.root("name")),
            updated_annotations=self._string_map(doc.get("updatedAnnotations"), Path.root("updatedAnnotations")),
            rollback_to=RollbackConfig(revision=self._int(rb.get("revision"), rb_at.child("revision"))),
        )

    def _job(self, doc: Mapping) -> Job:
        spec_at = Path.root("spec")
        s = self._map(doc.get("spec"), spec_at)
        template = self._pod_template(s.get("template"), spec_at.child("template"))
        selector = self._label_selector(s.get("selector"), spec_at.child("selector"))
        if self.apply_defaults and selector is None and template.metadata.labels:
            selector = LabelSelector(match_labels=dict(template.metadata.labels))

        st_at = Path.root("status")
        st = self._map(doc.get("status"), st_at)
        return Job(
            metadata=self._object_meta(doc.get("metadata"), Path.root("metadata")),
            spec=JobSpec(
                parallelism=self._opt_int(s.get("parallelism"), spec_at.child("parallelism")),
                completions=self._opt_int(s.get("completions"), spec_at.child("completions")),
                active_deadline_seconds=self._opt_int(s.get("activeDeadlineSeconds"),
                                                      spec_at.child("activeDeadlineSeconds")),
                selector=selector,
                template=template,
            ),
            status=JobStatus(
                active=self._int(st.get("active"), st_at.child("active")),
                succeeded=self._int(st.get("succeeded"), st_at.child("succeeded")),
                failed=self._int(st.get("failed"), st_at.child("failed")),
            ),
        )

    def _ingress_backend(self, raw: Any, at: Path) -> IngressBackend:
        m = self._map(raw, at)
        if "service" in m:
            svc_at = at.child("service")
            svc = self._map(m["service"], svc_at)
            port_at = svc_at.child("port")
            port = self._map(svc.get("port"), port_at)
            if "name" in port:
                service_port = IntOrString.from_string(self._str(port["name"], port_at.child("name")))
            else:
                service_port = IntOrString.from_int(self._int(port.get("number"), port_at.child("number")))
            return IngressBackend(service_name=self._str(svc.get("name"), svc_at.child("name")),
                                  service_port=service_port)
        return IngressBackend(
            service_name=self._str(m.get("serviceName"), at.child("serviceName")),
            service_port=self._int_or_string(m.get("servicePort"), at.child("servicePort")),
        )

    def _ingress(self, doc: Mapping) -> Ingress:
        spec_at = Path.root("spec")
        s = self._map(doc.get("spec"), spec_at)
        spec = IngressSpec()
        # networking/v1 renamed `backend` to `defaultBackend`
        for key in ("backend", "defaultBackend"):
            if s.get(key) is not None:
                spec.backend = self._ingress_backend(s[key], spec_at.child(key))

        for i, t in enumerate(self._list(s.get("tls"), spec_at.child("tls"))):
            t_at = spec_at.child("tls").index(i)
            t = self._map(t, t_at)
            spec.tls.append(IngressTLS(
                hosts=[self._str(h, t_at.child("hosts").index(j))
                       for j, h in enumerate(self._list(t.get("hosts"), t_at.child("hosts")))],
                secret_name=self._str(t.get("secretName"), t_at.child("secretName")),
            ))

        for i, r in enumerate(self._list(s.get("rules"), spec_at.child("rules"))):
            r_at = spec_at.child("rules").index(i)
            r = self._map(r, r_at)
            rule = IngressRule(host=self._str(r.get("host"), r_at.child("host")))
            if r.get("http") is not None:
                h_at = r_at.child("http")
                h = self._map(r["http"], h_at)
                rule.http = HTTPIngressRuleValue()
                for j, p in enumerate(self._list(h.get("paths"), h_at.child("paths"))):
                    p_at = h_at.child("paths").index(j)
                    p = self._map(p, p_at)
                    rule.http.paths.append(HTTPIngressPath(
                        path=self._str(p.get("path"), p_at.child("path")),
                        backend=self._ingress_backend(p.get("backend"), p_at.child("backend")),
                    ))
            spec.rules.append(rule)

        lb_at = Path.root("status", "loadBalancer")
        lb = self._map(self._map(doc.get("status"), Path.root("status")).get("loadBalancer"), lb_at)
        status = IngressStatus(LoadBalancerStatus())
        for i, e in enumerate(self._list(lb.get("ingress"), lb_at.child("ingress"))):
            e_at = lb_at.child("ingress").index(i)
            e = self._map(e, e_at)
            status.load_balancer.ingress.append(LoadBalancerIngress(
                ip=self._str(e.get("ip"), e_at.child("ip")),
                hostname=self._str(e.get("hostname"), e_at.child("hostname")),
            ))

        return Ingress(metadata=self._object_meta(doc.get("metadata"), Path.root("metadata")),
                       spec=spec, status=status)

    def _cluster_autoscaler(self, doc: Mapping) -> ClusterAutoscaler:
        spec_at = Path.root("spec")
        s = self._map(doc.get("spec"), spec_at)
        targets = []
        for i, t in enumerate(self._list(s.get("targetUtilization"), spec_at.child("targetUtilization"))):
            t_at = spec_at.child("targetUtilization").index(i)
            t = self._map(t, t_at)
            targets.append(NodeUtilization(resource=self._str(t.get("resource"), t_at.child("resource")),
                                           value=self._float(t.get("value"), t_at.child("value"))))
        return ClusterAutoscaler(
            metadata=self._object_meta(doc.get("metadata"), Path.root("metadata")),
            spec=ClusterAutoscalerSpec(
                min_nodes=self._int(s.get("minNodes"), spec_at.child("minNodes")),
                max_nodes=self._int(s.get("maxNodes"), spec_at.child("maxNodes")),
                target_utilization=targets,
            ),
        )

    def _scale(self, doc: Mapping) -> Scale:
        s = self._map(doc.get("spec"), Path.root("spec"))
        st_at = Path.root("status")
        st = self._map(doc.get("status"), st_at)
        return Scale(
            metadata=self._object_meta(doc.get("metadata"), Path.root("metadata")),
            spec=ScaleSpec(replicas=self._int(s.get("replicas"), Path.root("spec", "replicas"))),
            status=ScaleStatus(replicas=self._int(st.get("replicas"), st_at.child("replicas")),
                               selector=self._string_map(st.get("selector"), st_at.child("selector"))),
        )

    def _config_map(self, doc: Mapping) -> ConfigMap:
        return ConfigMap(
            metadata=self._object_meta(doc.get("metadata"), Path.root("metadata")),
            data=self._string_map(doc.get("data"), Path.root("data")),
        )


def _default_pull_policy(image: str) -> str:
    """`Always` for untagged or `:latest` images, `IfNotPresent` otherwise."""
    if "@" in image:
        return PULL_IF_NOT_PRESENT
    last = image.rsplit("/", 1)[-1]
    if ":" not in last or last.endswith(":latest"):
        return PULL_ALWAYS
    return PULL_IF_NOT_PRESENT
